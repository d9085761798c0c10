"""
Utility modules for Finsight.

This package contains reusable utility functions for date handling,
rate conversions, and error handling throughout the application.
"""

from finsight.utils.date_utils import (
    parse_date,
    format_date_for_storage,
    is_iso_date,
    today_iso,
    month_key,
    year_key,
    shift_month,
    month_label,
    MONTH_LABELS,
)

from finsight.utils.rate_utils import (
    annual_pct_to_decimal,
    annual_pct_to_monthly_decimal,
    monthly_decimal_to_annual_pct,
    validate_rate_range,
    normalize_rate_input,
    MONTHS_PER_YEAR,
    PERCENTAGE_TO_DECIMAL,
)

from finsight.utils.error_utils import (
    FinsightError,
    RecordStoreError,
    DataFormatError,
    AdvisorError,
    error_handler,
    logger,
)

__all__ = [
    # Date utilities
    "parse_date",
    "format_date_for_storage",
    "is_iso_date",
    "today_iso",
    "month_key",
    "year_key",
    "shift_month",
    "month_label",
    "MONTH_LABELS",
    # Rate utilities
    "annual_pct_to_decimal",
    "annual_pct_to_monthly_decimal",
    "monthly_decimal_to_annual_pct",
    "validate_rate_range",
    "normalize_rate_input",
    "MONTHS_PER_YEAR",
    "PERCENTAGE_TO_DECIMAL",
    # Error handling
    "FinsightError",
    "RecordStoreError",
    "DataFormatError",
    "AdvisorError",
    "error_handler",
    "logger",
]
