"""
Central date utilities for Finsight.

Record dates are stored as zero-padded ISO calendar strings (YYYY-MM-DD).
Period filtering and monthly bucketing compare string prefixes of that form,
so every date entering the system is normalized here first.

Key Features:
- Lenient parsing of user/backup-file dates into ISO storage strings
- Month keys (YYYY-MM) and month arithmetic for projection timelines
- Short month labels for charts
"""

from datetime import datetime, date
import pandas as pd
from typing import Union, Optional
import re
from finsight.utils.error_utils import error_handler


MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MONTH_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}$")
YEAR_KEY_PATTERN = re.compile(r"^\d{4}$")


@error_handler
def parse_date(date_input: Union[str, datetime, date, pd.Timestamp]) -> pd.Timestamp:
    """
    Parse a date from the formats accepted on input.

    Args:
        date_input: Date as ISO string, DD/MM/YYYY string, date, datetime or Timestamp

    Returns:
        pd.Timestamp: Parsed timestamp (time component dropped)

    Raises:
        ValueError: If the string cannot be parsed
        TypeError: If input type is not supported

    Examples:
        >>> parse_date("2026-02-01")
        Timestamp('2026-02-01 00:00:00')
        >>> parse_date("01/02/2026")
        Timestamp('2026-02-01 00:00:00')
    """
    if date_input is None:
        raise ValueError("Date input cannot be None")

    if isinstance(date_input, pd.Timestamp):
        result = date_input
    elif isinstance(date_input, (datetime, date)):
        result = pd.Timestamp(date_input)
    elif isinstance(date_input, str):
        result = _parse_date_string(date_input.strip())
    else:
        raise TypeError(f"Unsupported date input type: {type(date_input)}")

    return result.normalize()


def _parse_date_string(date_str: str) -> pd.Timestamp:
    """Parse a date string, trying ISO first and day-first second."""
    if not date_str:
        raise ValueError("Date string cannot be empty")

    format_patterns = [
        "%Y-%m-%d",
        "%Y/%m/%d",
        "%d/%m/%Y",
        "%d-%m-%Y",
    ]

    for format_str in format_patterns:
        try:
            return pd.Timestamp(datetime.strptime(date_str, format_str))
        except ValueError:
            continue

    # ISO timestamps such as "2026-02-01T10:00:00Z"
    try:
        parsed = pd.Timestamp(date_str)
    except (ValueError, TypeError):
        parsed = None
    if parsed is not None and parsed is not pd.NaT:
        if parsed.tzinfo is not None:
            parsed = parsed.tz_convert(None)
        return parsed

    raise ValueError(
        f"Unable to parse date string '{date_str}'. Supported formats include: YYYY-MM-DD, DD/MM/YYYY"
    )


@error_handler
def format_date_for_storage(date_input: Union[str, datetime, date, pd.Timestamp]) -> str:
    """
    Format a date for record storage (YYYY-MM-DD).

    Strings already in storage form are returned untouched so that stored
    records survive a load/save cycle byte for byte.
    """
    if isinstance(date_input, str) and ISO_DATE_PATTERN.match(date_input):
        return date_input
    return parse_date(date_input).strftime("%Y-%m-%d")


def is_iso_date(value: Optional[str]) -> bool:
    """Check whether a value is a YYYY-MM-DD string."""
    return isinstance(value, str) and bool(ISO_DATE_PATTERN.match(value))


def today_iso(today: Optional[date] = None) -> str:
    """Today's date as YYYY-MM-DD."""
    return (today or date.today()).isoformat()


def month_key(value: Union[str, date]) -> str:
    """
    Month key (YYYY-MM) of an ISO date string or date.

    Examples:
        >>> month_key("2026-02-14")
        '2026-02'
    """
    if isinstance(value, date):
        value = value.isoformat()
    return value[:7]


def year_key(value: Union[str, date]) -> str:
    """Year key (YYYY) of an ISO date string or date."""
    if isinstance(value, date):
        value = value.isoformat()
    return value[:4]


@error_handler
def shift_month(key: str, offset: int) -> str:
    """
    Move a month key by a number of months.

    Examples:
        >>> shift_month("2026-01", -1)
        '2025-12'
        >>> shift_month("2026-11", 3)
        '2027-02'
    """
    period = pd.Period(key, freq="M") + offset
    return period.strftime("%Y-%m")


def month_label(key: str, reference_year: Optional[str] = None) -> str:
    """
    Short chart label for a month key.

    The year suffix is added only when it differs from the reference year.

    Examples:
        >>> month_label("2026-03", "2026")
        'Mar'
        >>> month_label("2027-01", "2026")
        "Jan '27"
    """
    year, month = key.split("-")
    label = MONTH_LABELS[int(month) - 1]
    if reference_year is not None and year != reference_year:
        label += f" '{year[2:]}"
    return label
