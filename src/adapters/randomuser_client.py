"""Cliente de la Random User API.

Operaciones de conveniencia sobre `ResilientClient`. Cada una valida sus
parámetros *antes* de tocar la red y falla con `ConfigError` (nunca se
reintenta); después delega en una única llamada con reintentos.
"""

from __future__ import annotations

from typing import Any, Iterable

from adapters.http_client import ResilientClient
from core.config import ClientConfig
from core.domain.errors import ConfigError


MIN_RESULTS = 1
MAX_RESULTS = 5000

SUPPORTED_NATIONALITIES: tuple[str, ...] = (
    "AU", "BR", "CA", "CH", "DE", "DK", "ES", "FI",
    "FR", "GB", "IE", "IN", "IR", "MX", "NL", "NO",
    "NZ", "RS", "TR", "US",
)

AVAILABLE_FIELDS: tuple[str, ...] = (
    "gender", "name", "location", "email", "login",
    "dob", "registered", "phone", "cell", "id",
    "picture", "nat",
)

SUPPORTED_GENDERS: tuple[str, ...] = ("male", "female")

_DEFAULT_PARAMS: dict[str, Any] = {"format": "json", "results": 1}


def validate_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or not MIN_RESULTS <= count <= MAX_RESULTS:
        raise ConfigError(f"Count must be between {MIN_RESULTS} and {MAX_RESULTS}")
    return count


def normalize_nationality(nationality: str) -> str:
    code = nationality.strip().upper() if isinstance(nationality, str) else ""
    if code not in SUPPORTED_NATIONALITIES:
        raise ConfigError(f"Unsupported nationality: {nationality}")
    return code


def validate_fields(fields: Iterable[str]) -> list[str]:
    selected = list(fields)
    invalid = [field for field in selected if field not in AVAILABLE_FIELDS]
    if invalid:
        raise ConfigError(f"Invalid fields: {', '.join(invalid)}")
    if not selected:
        raise ConfigError("At least one field is required")
    return selected


def validate_gender(gender: str) -> str:
    if gender not in SUPPORTED_GENDERS:
        raise ConfigError(f"Unsupported gender: {gender}")
    return gender


class RandomUserClient:
    """Operaciones de alto nivel; todas terminan en `get_users`."""

    def __init__(self, http: ResilientClient | None = None, *, config: ClientConfig | None = None) -> None:
        self.http = http or ResilientClient(config)

    async def get_users(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        merged = {**_DEFAULT_PARAMS, **(params or {})}
        envelope = await self.http.request(self.http.spec_for(params=merged))
        return envelope.payload

    async def get_single_user(self, **params: Any) -> dict[str, Any]:
        return await self.get_users({**params, "results": 1})

    async def get_multiple_users(self, count: int, **params: Any) -> dict[str, Any]:
        return await self.get_users({**params, "results": validate_count(count)})

    async def get_users_by_gender(self, gender: str, count: int = 1) -> dict[str, Any]:
        return await self.get_users({"gender": validate_gender(gender), "results": validate_count(count)})

    async def get_users_by_nationality(self, nationality: str, count: int = 1) -> dict[str, Any]:
        return await self.get_users(
            {"nat": normalize_nationality(nationality), "results": validate_count(count)}
        )

    async def get_users_with_fields(self, fields: Iterable[str], count: int = 1) -> dict[str, Any]:
        return await self.get_users({"inc": ",".join(validate_fields(fields)), "results": validate_count(count)})

    async def get_users_without_fields(self, fields: Iterable[str], count: int = 1) -> dict[str, Any]:
        return await self.get_users({"exc": ",".join(validate_fields(fields)), "results": validate_count(count)})

    async def get_users_with_seed(self, seed: str, count: int = 1) -> dict[str, Any]:
        if not isinstance(seed, str) or not seed.strip():
            raise ConfigError("Seed must be a non-empty string")
        return await self.get_users({"seed": seed, "results": validate_count(count)})

    async def get_page(self, page: int, seed: str, count: int = 1) -> dict[str, Any]:
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ConfigError("Page must be a positive integer")
        if not isinstance(seed, str) or not seed.strip():
            raise ConfigError("Seed must be a non-empty string")
        return await self.get_users({"page": page, "seed": seed, "results": validate_count(count)})
