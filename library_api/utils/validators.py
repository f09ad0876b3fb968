import re
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from library_api.errors import NotFoundError, ValidationError

PASSWORD_MIN_LENGTH = 8

# signed 64-bit, the widest integer column any supported database stores
MAX_DB_INT = 2**63 - 1
MIN_DB_INT = -(2**63)

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile(r"[^A-Za-z0-9]")


def normalize_email(raw: Optional[str]) -> str:
    """Return the normalized address or raise ``ValidationError("Invalid Email")``."""
    try:
        result = validate_email(str(raw or "").strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValidationError("Invalid Email") from exc
    return result.normalized


def is_strong_password(password: Optional[str]) -> bool:
    # at least 8 chars with one lowercase, one uppercase, one digit and one symbol
    if not isinstance(password, str) or len(password) < PASSWORD_MIN_LENGTH:
        return False
    return all(p.search(password) for p in (_LOWER, _UPPER, _DIGIT, _SYMBOL))


def require_strong_password(password: Optional[str]) -> str:
    if not is_strong_password(password):
        raise ValidationError("Invalid password")
    return password


def require_text(data: dict, field: str) -> str:
    value = data.get(field)
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def optional_text(data: dict, field: str) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _to_int(value) -> int:
    # bools are ints in Python, reject them explicitly
    if isinstance(value, bool):
        raise ValueError(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(value)
        return int(value)
    return int(str(value).strip())


def parse_int(value, field: str, bounded: bool = True) -> int:
    """Coerce to int. With ``bounded`` the result must fit a BIGINT column."""
    try:
        number = _to_int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{field} must be an integer") from None
    if bounded and not MIN_DB_INT <= number <= MAX_DB_INT:
        raise ValidationError(f"{field} is out of range")
    return number


def parse_id(raw, message: str) -> int:
    # a malformed or out-of-range id can never resolve to a row
    try:
        number = _to_int(raw)
    except (TypeError, ValueError, OverflowError):
        raise NotFoundError(message) from None
    if not MIN_DB_INT <= number <= MAX_DB_INT:
        raise NotFoundError(message)
    return number


def parse_copies(value) -> int:
    if value is None:
        raise ValidationError("copies is required")
    copies = parse_int(value, "copies")
    if copies < 0:
        raise ValidationError("copies must be zero or greater")
    return copies


def book_fields(data: dict, partial: bool = False) -> dict:
    """Validate book input and return the cleaned fields.

    With ``partial=True`` only the keys present in ``data`` are checked and
    returned; required fields may be omitted but not blanked.
    """
    fields = {}
    for name in ("category", "author"):
        if not partial or name in data:
            fields[name] = require_text(data, name)
    if "title" in data:
        fields["title"] = optional_text(data, "title")
    if not partial or "copies" in data:
        fields["copies"] = parse_copies(data.get("copies"))
    return fields


def json_object(payload) -> dict:
    # request bodies that are not JSON objects are treated as empty
    return payload if isinstance(payload, dict) else {}
