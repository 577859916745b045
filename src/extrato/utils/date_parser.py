"""Date parsing utilities."""

import calendar
import re
from datetime import date, timedelta
from dateutil.relativedelta import relativedelta

from extrato.domain.errors import ValidationError

_DATE_RE = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")

MIN_PERIOD_YEAR = 2000
MAX_PERIOD_YEAR = 2100


def parse_date(date_str: str) -> date:
    """Parse a pt-BR date string (DD/MM/YYYY) into a date object.

    Surrounding whitespace is ignored; anything else must match the format
    exactly. Day ranges follow the calendar, so 29/02 is only valid in leap
    years.

    Args:
        date_str: Date string in DD/MM/YYYY format

    Returns:
        Date object

    Raises:
        ValidationError: If the string is not a valid DD/MM/YYYY date
    """
    if date_str is None or not date_str.strip():
        raise ValidationError("Date is empty")

    trimmed = date_str.strip()
    match = _DATE_RE.match(trimmed)
    if match is None:
        raise ValidationError(f"Invalid date format: '{trimmed}'. Expected DD/MM/YYYY")

    day, month, year = (int(part) for part in match.groups())

    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month {month} in date '{trimmed}'. Expected 1-12")

    days_in_month = calendar.monthrange(year, month)[1]
    if not 1 <= day <= days_in_month:
        raise ValidationError(
            f"Invalid day {day} in date '{trimmed}'. "
            f"{month:02d}/{year} has {days_in_month} days"
        )

    return date(year, month, day)


def validate_period(period_month: int, period_year: int) -> None:
    """Validate an import period.

    Raises:
        ValidationError: If month is outside 1-12 or year outside 2000-2100
    """
    if not 1 <= period_month <= 12:
        raise ValidationError(f"Invalid period month {period_month}. Expected 1-12")
    if not MIN_PERIOD_YEAR <= period_year <= MAX_PERIOD_YEAR:
        raise ValidationError(
            f"Invalid period year {period_year}. "
            f"Expected {MIN_PERIOD_YEAR}-{MAX_PERIOD_YEAR}"
        )


def get_period_range(period_month: int, period_year: int) -> tuple[date, date]:
    """Get first and last day of a statement period.

    Args:
        period_month: Month (1-12)
        period_year: Year

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValidationError: If the period is invalid
    """
    validate_period(period_month, period_year)
    start_date = date(period_year, period_month, 1)
    end_date = start_date + relativedelta(months=1) - timedelta(days=1)
    return (start_date, end_date)
