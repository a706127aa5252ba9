"""Estrategias de validación (ValidationEngine).

Tres familias:
- Formato de campo: una sola `FieldFormatStrategy` parametrizada con la
  comprobación y el mensaje; la factory arma email, UUID, URL, fecha y
  coordenadas. Validan un escalar o, con `path`, un valor extraído de un
  registro (`"login.uuid"`).
- Estructurales: forma de un usuario y del envelope de respuesta.
- Composite: lista ordenada de estrategias; ejecuta todas, sin cortocircuito,
  y concatena los errores en orden.

Ningún fallo de validación se lanza como excepción: siempre se devuelve un
`ValidationResult`.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, Callable, Iterable

from core.domain.models import ValidationResult
from core.interfaces.contracts import ValidationStrategy
from core.validation.checks import (
    calculate_age,
    is_valid_coordinate,
    is_valid_date,
    is_valid_email,
    is_valid_url,
    is_valid_uuid,
)


USER_REQUIRED_FIELDS: tuple[str, ...] = (
    "gender",
    "name",
    "location",
    "email",
    "login",
    "dob",
    "registered",
    "phone",
    "cell",
    "id",
    "picture",
    "nat",
)

_MISSING = object()


def resolve_path(data: Any, path: str) -> Any:
    """Extrae `a.b.c` de mappings anidados; devuelve un centinela si falta."""

    current = data
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


class FieldFormatStrategy:
    """Valida el formato de un valor con una comprobación pura.

    Sin `path` valida el dato recibido tal cual; con `path` extrae antes el
    valor anidado (`"login.uuid"`) y reporta `Missing value at <path>` si falta.
    """

    def __init__(
        self,
        name: str,
        field: str,
        check: Callable[[Any], bool],
        message: Callable[[Any], str],
        path: str | None = None,
    ) -> None:
        self._name = name
        self.field = field
        self.check = check
        self.message = message
        self.path = path

    @property
    def name(self) -> str:
        return self._name

    def validate(self, data: Any) -> ValidationResult:
        value = data
        if self.path is not None:
            value = resolve_path(data, self.path)
            if value is _MISSING:
                return ValidationResult.from_errors([f"Missing value at {self.path}"], field=self.field)
        if self.check(value):
            return ValidationResult.ok(field=self.field)
        return ValidationResult.from_errors([self.message(value)], field=self.field)


def _coordinate_parts(value: Any) -> tuple[Any, Any]:
    if isinstance(value, Mapping):
        return value.get("latitude"), value.get("longitude")
    return None, None


def _coordinate_message(value: Any) -> str:
    lat, lon = _coordinate_parts(value)
    return f"Invalid coordinates: lat={lat}, lon={lon}"


class AgeConsistencyValidationStrategy:
    """Comprueba que `dob.age` coincide (±1 año) con la edad derivada de `dob.date`."""

    def __init__(self, *, today: Callable[[], date] = date.today) -> None:
        self._today = today

    @property
    def name(self) -> str:
        return "AgeConsistencyValidation"

    def validate(self, data: Any) -> ValidationResult:
        dob = resolve_path(data, "dob")
        if not isinstance(dob, Mapping):
            return ValidationResult.from_errors(["Missing value at dob"], field="dob")
        expected = calculate_age(dob.get("date"), today=self._today())
        reported = dob.get("age")
        if expected is None or not isinstance(reported, int) or isinstance(reported, bool):
            return ValidationResult.from_errors(
                [f"Cannot derive age from dob: {dict(dob)}"],
                field="dob",
            )
        if abs(expected - reported) > 1:
            return ValidationResult.from_errors(
                [f"Age mismatch: reported {reported}, derived {expected}"],
                field="dob",
            )
        return ValidationResult.ok(field="dob")


class UserStructureValidationStrategy:
    """Un registro de usuario tiene todos los campos requeridos y sub-campos clave.

    Un campo cuenta como presente si la clave existe, aunque valga `null`; el
    formato de ese valor lo juzgan las estrategias de campo.
    """

    def __init__(self, required_fields: Sequence[str] = USER_REQUIRED_FIELDS) -> None:
        self.required_fields = tuple(required_fields)

    @property
    def name(self) -> str:
        return "UserStructureValidation"

    def validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, Mapping):
            return ValidationResult.from_errors(["User record must be an object"], field="user")

        errors = [
            f"Missing required field: {field}"
            for field in self.required_fields
            if field not in data
        ]

        name = data.get("name")
        if isinstance(name, Mapping) and not (name.get("first") and name.get("last")):
            errors.append("Name must have first and last properties")

        location = data.get("location")
        if isinstance(location, Mapping) and not (location.get("city") and location.get("country")):
            errors.append("Location must have city and country properties")

        return ValidationResult.from_errors(errors, field="user")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ResponseStructureValidationStrategy:
    """El envelope tiene `results` (lista) e `info` con results/page/seed."""

    @property
    def name(self) -> str:
        return "ResponseStructureValidation"

    def validate(self, data: Any) -> ValidationResult:
        if not isinstance(data, Mapping):
            return ValidationResult.from_errors(["Response must be an object"], field="response")

        errors: list[str] = []
        if not isinstance(data.get("results"), list):
            errors.append("Response must have results array")

        info = data.get("info")
        if not isinstance(info, Mapping):
            errors.append("Response must have info object")
        else:
            if not _is_number(info.get("results")):
                errors.append("Info must have results number")
            if not _is_number(info.get("page")):
                errors.append("Info must have page number")
            if not isinstance(info.get("seed"), str):
                errors.append("Info must have seed string")

        return ValidationResult.from_errors(errors, field="response")


class CompositeValidationStrategy:
    """Agrega estrategias en orden. Válido sólo si todas lo son."""

    def __init__(self, strategies: Iterable[ValidationStrategy] = ()) -> None:
        self._strategies: list[ValidationStrategy] = list(strategies)

    @property
    def strategies(self) -> list[ValidationStrategy]:
        return list(self._strategies)

    @property
    def name(self) -> str:
        return f"CompositeValidation({', '.join(s.name for s in self._strategies)})"

    def add_strategy(self, strategy: ValidationStrategy) -> None:
        self._strategies.append(strategy)

    def remove_strategy(self, strategy_name: str) -> None:
        self._strategies = [s for s in self._strategies if s.name != strategy_name]

    def validate(self, data: Any) -> ValidationResult:
        results = [strategy.validate(data) for strategy in self._strategies]
        errors = [error for result in results for error in result.errors]
        return ValidationResult(
            is_valid=all(result.is_valid for result in results),
            errors=tuple(errors),
            field="composite",
        )


class ValidationContext:
    """Ejecuta la estrategia activa; se puede cambiar en caliente."""

    def __init__(self, strategy: ValidationStrategy) -> None:
        self._strategy = strategy

    def set_strategy(self, strategy: ValidationStrategy) -> None:
        self._strategy = strategy

    def execute_validation(self, data: Any) -> ValidationResult:
        return self._strategy.validate(data)

    def validate_many(self, items: Iterable[Any]) -> list[ValidationResult]:
        return [self._strategy.validate(item) for item in items]

    @property
    def current_strategy(self) -> str:
        return self._strategy.name


class ValidationStrategyFactory:
    """Estrategias preconstruidas.

    `create_full_user_validator` es una receta fija (estructura + email +
    `login.uuid`), no un mecanismo genérico.
    """

    @staticmethod
    def create_email_validator(path: str | None = None) -> FieldFormatStrategy:
        return FieldFormatStrategy(
            "EmailValidation", "email", is_valid_email, lambda v: f"Invalid email format: {v}", path
        )

    @staticmethod
    def create_uuid_validator(path: str | None = None) -> FieldFormatStrategy:
        return FieldFormatStrategy(
            "UUIDValidation", "uuid", is_valid_uuid, lambda v: f"Invalid UUID format: {v}", path
        )

    @staticmethod
    def create_url_validator(path: str | None = None) -> FieldFormatStrategy:
        return FieldFormatStrategy(
            "URLValidation", "url", is_valid_url, lambda v: f"Invalid URL format: {v}", path
        )

    @staticmethod
    def create_date_validator(path: str | None = None) -> FieldFormatStrategy:
        return FieldFormatStrategy(
            "DateValidation", "date", is_valid_date, lambda v: f"Invalid date format: {v}", path
        )

    @staticmethod
    def create_coordinate_validator(path: str | None = None) -> FieldFormatStrategy:
        """Espera un mapping con `latitude` y `longitude` (str o número)."""

        return FieldFormatStrategy(
            "CoordinateValidation",
            "coordinates",
            lambda v: is_valid_coordinate(*_coordinate_parts(v)),
            _coordinate_message,
            path,
        )

    @staticmethod
    def create_user_structure_validator() -> ValidationStrategy:
        return UserStructureValidationStrategy()

    @staticmethod
    def create_response_structure_validator() -> ValidationStrategy:
        return ResponseStructureValidationStrategy()

    @classmethod
    def create_full_user_validator(cls) -> CompositeValidationStrategy:
        return CompositeValidationStrategy(
            [
                UserStructureValidationStrategy(),
                cls.create_email_validator(path="email"),
                cls.create_uuid_validator(path="login.uuid"),
            ]
        )

    @classmethod
    def create_user_details_validator(cls) -> CompositeValidationStrategy:
        """Formatos de los campos anidados de un usuario completo."""

        return CompositeValidationStrategy(
            [
                cls.create_date_validator(path="dob.date"),
                cls.create_date_validator(path="registered.date"),
                AgeConsistencyValidationStrategy(),
                cls.create_coordinate_validator(path="location.coordinates"),
                cls.create_url_validator(path="picture.large"),
                cls.create_url_validator(path="picture.medium"),
                cls.create_url_validator(path="picture.thumbnail"),
            ]
        )
