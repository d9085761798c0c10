"""
Rate conversion utilities for debt calculations.

Conventions:
- Debt interest rates are entered as annual percentages (APR, e.g. 21.99 = 21.99%)
- Calculations use decimal rates (e.g. 0.2199)
- Monthly rates are derived from annual rates: annual_decimal / 12 (no compounding)
"""

from typing import Union
from finsight.utils.error_utils import error_handler


# Convenience constants for common conversions
MONTHS_PER_YEAR = 12
PERCENTAGE_TO_DECIMAL = 100.0


@error_handler
def annual_pct_to_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert annual percentage rate to decimal format.

    Examples:
        >>> annual_pct_to_decimal(5.0)
        0.05
        >>> annual_pct_to_decimal("7.5")
        0.075
    """
    return float(rate_pct) / PERCENTAGE_TO_DECIMAL


@error_handler
def annual_pct_to_monthly_decimal(rate_pct: Union[float, str]) -> float:
    """
    Convert an APR percentage to the monthly decimal rate used for amortization.

    Args:
        rate_pct: Annual rate as percentage (e.g. 24.0 for 24%)

    Returns:
        Monthly rate as decimal (e.g. 0.02 for 24% APR)

    Examples:
        >>> annual_pct_to_monthly_decimal(24.0)
        0.02
        >>> round(annual_pct_to_monthly_decimal("21.99"), 6)
        0.018325
    """
    return annual_pct_to_decimal(rate_pct) / MONTHS_PER_YEAR


@error_handler
def monthly_decimal_to_annual_pct(monthly_rate_decimal: float) -> float:
    """
    Convert a monthly decimal rate back to an annual percentage.

    Examples:
        >>> monthly_decimal_to_annual_pct(0.005)
        6.0
    """
    return monthly_rate_decimal * MONTHS_PER_YEAR * PERCENTAGE_TO_DECIMAL


@error_handler
def validate_rate_range(rate_pct: float, min_pct: float = 0.0, max_pct: float = 100.0) -> bool:
    """
    Validate that an APR is within reasonable bounds.

    Examples:
        >>> validate_rate_range(21.99)
        True
        >>> validate_rate_range(-1.0)
        False
    """
    return min_pct <= rate_pct <= max_pct


@error_handler
def normalize_rate_input(rate_input: Union[str, float, int]) -> float:
    """
    Normalize rate input from form-style strings to a float percentage.

    Handles string inputs, removes percentage signs, and validates ranges.

    Raises:
        ValueError: If rate cannot be converted or is out of range

    Examples:
        >>> normalize_rate_input("21.99%")
        21.99
        >>> normalize_rate_input(4.99)
        4.99
    """
    if isinstance(rate_input, str):
        cleaned = rate_input.strip().rstrip('%')
        try:
            rate_float = float(cleaned)
        except ValueError:
            raise ValueError(f"Cannot convert rate input '{rate_input}' to number")
    else:
        rate_float = float(rate_input)

    if not validate_rate_range(rate_float):
        raise ValueError(f"Rate {rate_float}% is outside valid range (0% to 100%)")

    return rate_float
