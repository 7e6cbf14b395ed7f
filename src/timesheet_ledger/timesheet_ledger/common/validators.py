from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return value.strip()


def optional_str(value: Optional[str]) -> Optional[str]:
    """Blank query parameters behave like missing ones."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_bool_flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "sim"}
