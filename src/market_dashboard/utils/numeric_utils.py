"""
Numeric Utilities

Lenient coercion of scraped values. Bad input never raises; it falls back
to the caller's default so one malformed record cannot abort a batch.
"""
import math
from typing import Any, Optional

_MISSING_TOKENS = {"", "-", "N/A", "NA", "NAN", "NONE", "NULL"}


def parse_numeric(value: Any, default: Optional[float] = 0) -> Optional[float]:
    """
    Coerce a scraped value into a float.

    Parameters:
        value: int, float, numeric string ("1,23,456.50" allowed) or anything else
        default: Returned for None, blanks, placeholder tokens, non-numeric
            strings and non-finite numbers

    Returns:
        float or default
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if text.upper() in _MISSING_TOKENS:
            return default
        try:
            number = float(text.replace(",", ""))
        except ValueError:
            return default
    else:
        return default
    if not math.isfinite(number):
        return default
    return number


def round2(value: Optional[float]) -> float:
    return round(float(value or 0), 2)


def format_percentage(value: Optional[float]) -> str:
    """Two-decimal string form, e.g. 0 -> "0.00"."""
    return f"{float(value or 0):.2f}"


def safe_ratio(numerator: float, denominator: float, default: float = 0.0) -> float:
    if not denominator:
        return default
    return numerator / denominator
