from __future__ import annotations

import re
from typing import Any, Optional

from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Category, ConfirmationStatus, Role
from ..core.exceptions import ValidationError

HHMM_RE = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")
EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def require_min_length(value: Optional[str], field_name: str, min_len: int = MIN_PASSWORD_LENGTH) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "email").lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("email is not valid")
    return email


def require_bool(value: Any, field_name: str) -> bool:
    # 0/1 ints are bools too for Python, reject them explicitly.
    if not isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a boolean")
    return value


def require_positive_id(value: Any, field_name: str) -> int:
    # bool is an int subclass; floats must be whole numbers.
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} is not valid")
    if isinstance(value, int):
        ident = value
    elif isinstance(value, float) and value.is_integer():
        ident = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        ident = int(value.strip())
    else:
        raise ValidationError(f"{field_name} is not valid")
    if ident <= 0:
        raise ValidationError(f"{field_name} is not valid")
    return ident


def optional_positive_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_positive_id(value, field_name)


def require_category(value: Any) -> Category:
    try:
        return Category(str(value).strip().lower())
    except ValueError:
        raise ValidationError("category is not valid")


def require_role(value: Any) -> Role:
    try:
        return Role(str(value).strip().lower())
    except ValueError:
        raise ValidationError("role is not valid")


def require_confirmation_status(value: Any) -> ConfirmationStatus:
    try:
        return ConfirmationStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError("status is not valid")


def require_day_of_week(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("day_of_week must be between 0 and 6")
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError("day_of_week must be between 0 and 6")
    if not 0 <= day <= 6:
        raise ValidationError("day_of_week must be between 0 and 6")
    return day


def require_hhmm(value: Any, field_name: str) -> str:
    text = str(value or "").strip()
    if not HHMM_RE.match(text):
        raise ValidationError(f"{field_name} must be HH:MM")
    return text
