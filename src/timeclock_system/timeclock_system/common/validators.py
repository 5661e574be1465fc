from __future__ import annotations

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_pin(value: str, *, length: int = 4) -> str:
    pin = (value or "").strip()
    if len(pin) != length or not pin.isdigit():
        raise ValidationError(f"PIN must be {length} digits")
    return pin
