"""Date parsing helpers."""

from datetime import date, datetime
from errors import ValidationError


def parse_date(value, field: str = "date") -> date:
    """Accept a date or an ISO (YYYY-MM-DD) string.

    Raises:
        ValidationError: If the value is missing or not a valid date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(f"Invalid {field} {value!r}. Use YYYY-MM-DD.")
    raise ValidationError(f"{field} is required")
