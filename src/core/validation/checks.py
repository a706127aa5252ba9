"""Comprobaciones de formato sobre valores escalares.

Funciones puras, sin estado: las estrategias de validación las envuelven.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime

from pydantic import AnyUrl, TypeAdapter, ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


def is_valid_email(value: object) -> bool:
    return isinstance(value, str) and bool(_EMAIL_RE.match(value))


def is_valid_uuid(value: object) -> bool:
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def is_valid_url(value: object) -> bool:
    """URL absoluta con esquema y host."""

    if not isinstance(value, str) or not value.strip():
        return False
    try:
        url = _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return bool(url.host)


def parse_date(value: object) -> datetime | None:
    """Parsea fechas ISO-8601 (con o sin hora, con sufijo `Z`)."""

    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def is_valid_date(value: object) -> bool:
    return parse_date(value) is not None


def _to_float(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def is_valid_coordinate(latitude: object, longitude: object) -> bool:
    lat = _to_float(latitude)
    lon = _to_float(longitude)
    if lat is None or lon is None:
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0


def calculate_age(date_of_birth: object, *, today: date | None = None) -> int | None:
    dob = parse_date(date_of_birth)
    if dob is None:
        return None
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age
