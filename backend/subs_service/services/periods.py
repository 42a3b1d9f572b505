"""Month-year ("MM-YYYY") parsing shared by subscription dates and sum windows."""

import re
from datetime import date

from subs_service.errors import ValidationError

MONTH_YEAR_PATTERN = "MM-YYYY"

_MONTH_YEAR_RE = re.compile(r"[0-9]{2}-[0-9]{4}")


def parse_month_year(value: str) -> date:
    """Parse ``MM-YYYY`` into the first day of that month.

    Raises:
        ValidationError: If the value does not match the pattern or the
            month is outside 1..12.
    """
    if not isinstance(value, str) or not _MONTH_YEAR_RE.fullmatch(value):
        raise ValidationError(f"invalid date format: {value}, expected {MONTH_YEAR_PATTERN}")

    month, year = int(value[:2]), int(value[3:])
    try:
        return date(year, month, 1)
    except ValueError as exc:
        raise ValidationError(
            f"invalid date format: {value}, expected {MONTH_YEAR_PATTERN}"
        ) from exc


def format_month_year(value: date) -> str:
    """Render a month boundary back to ``MM-YYYY``."""
    return f"{value.month:02d}-{value.year:04d}"
