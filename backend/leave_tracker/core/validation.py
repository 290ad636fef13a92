from __future__ import annotations

from typing import Any, Iterable

from leave_tracker.core.exceptions import ValidationError


def require_non_empty_text(value: Any, field_name: str) -> str:
    text = str(value or "").strip()
    if not text:
        raise ValidationError(f"{field_name} is required")
    return text


def require_non_empty_list(values: Iterable[Any] | None, detail: str) -> list[Any]:
    normalized = list(values or [])
    if not normalized:
        raise ValidationError(detail)
    return normalized
