from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_date_range(start: date, end: date, *, today: date) -> None:
    """Reject malformed report ranges.

    A range may end in the future (e.g. "this month"), but it may not start
    after today since nothing could have been recorded yet.
    """
    if end < start:
        raise ValidationError("End date must be on or after start date")
    if start > today:
        raise ValidationError("Date range cannot start in the future")
