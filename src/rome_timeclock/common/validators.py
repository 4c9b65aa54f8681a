from __future__ import annotations

import math
import re
from typing import Optional

from ..core.constants import MAX_HOURS, PIN_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def as_text(value, field_name: str, *, allow_number: bool = False) -> str:
    """JSON value as a string; None is empty. PINs and codes may arrive as numbers."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if allow_number and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise ValidationError(f"{field_name} must be text.")


def optional_text(value, field_name: str) -> Optional[str]:
    return as_text(value, field_name).strip() or None


def require_non_empty(value, field_name: str) -> str:
    text = as_text(value, field_name).strip()
    if not text:
        raise ValidationError(f"{field_name} is required.")
    return text


def require_pin(value) -> str:
    pin = as_text(value, "PIN", allow_number=True).strip()
    if len(pin) != PIN_LENGTH or not pin.isdigit():
        raise ValidationError(f"PIN must be exactly {PIN_LENGTH} digits.")
    return pin


def require_email(value) -> str:
    email = as_text(value, "Email").strip()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email format")
    return email.lower()


def normalize_phone(value) -> Optional[str]:
    """Empty clears the phone; otherwise at least 10 digits are required."""
    phone = as_text(value, "Phone").strip()
    if not phone:
        return None
    if len(re.sub(r"\D", "", phone)) < 10:
        raise ValidationError("Invalid phone number")
    return phone


def require_non_negative(value, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number.")
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number.")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a number.")
    if number < 0:
        raise ValidationError(f"{field_name} cannot be negative.")
    if number > MAX_HOURS:
        raise ValidationError(f"{field_name} cannot exceed {MAX_HOURS}.")
    return number
