# utils/validators.py
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from utils.errors import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
CENTS = Decimal("0.01")


def dec(x) -> Decimal:
    return Decimal(str(x or 0)).quantize(CENTS, rounding=ROUND_HALF_UP)


def require_str(data: dict, field: str, min_len: int = 1, label: str | None = None) -> str:
    value = data.get(field)
    if not isinstance(value, str) or len(value.strip()) < min_len:
        name = label or field
        if min_len > 1:
            raise ValidationError(f"{name} must be at least {min_len} characters")
        raise ValidationError(f"{name} is required")
    return value.strip()


def optional_str(data: dict, field: str) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    value = value.strip()
    return value or None


def require_email(data: dict, field: str = "email") -> str:
    value = data.get(field)
    if not isinstance(value, str) or not _EMAIL_RE.match(value.strip()):
        raise ValidationError("Invalid email address")
    return value.strip()


def parse_int(value, field: str, minimum: int | None = None) -> int:
    # bools are ints in python, reject them explicitly
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        if isinstance(value, float) and not value.is_integer():
            raise ValueError
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    return number


def parse_money(value, field: str) -> Decimal:
    if isinstance(value, bool) or value is None or value == "":
        raise ValidationError(f"{field} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a number")
    if amount < 0:
        raise ValidationError(f"{field} must not be negative")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_id_list(raw: str | None, field: str) -> Optional[list[int]]:
    if not raw:
        return None
    return [parse_int(x, field) for x in str(raw).split(",") if x.strip()]
