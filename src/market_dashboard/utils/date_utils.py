"""
Date Utilities

Date keys are "YYYY-MM-DD" strings in market time (Asia/Kolkata).
"""
import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from market_dashboard.config import MARKET_TIMEZONE, DATE_KEY_FORMAT

CALENDAR_DATE_PATTERN = re.compile(r"^\d{2}-[A-Za-z]{3}-\d{4}$")


def now_ist() -> datetime:
    return datetime.now(MARKET_TIMEZONE)


def today_ist() -> str:
    """Today's date key in market time."""
    return now_ist().strftime(DATE_KEY_FORMAT)


def utc_now() -> datetime:
    """Naive UTC timestamp used for created_at / received_at columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_date_key(value: Optional[str]) -> bool:
    if not value or not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, DATE_KEY_FORMAT)
    except ValueError:
        return False
    return True


def parse_date_key(value: str) -> date:
    return datetime.strptime(value, DATE_KEY_FORMAT).date()


def shift_date_key(value: str, days: int) -> str:
    """
    Move a date key by a number of days.

    Parameters:
        value (str): YYYY-MM-DD
        days (int): Negative to move back

    Returns:
        str: Shifted YYYY-MM-DD
    """
    return (parse_date_key(value) + timedelta(days=days)).strftime(DATE_KEY_FORMAT)


def cutoff_datetime(days_to_keep: int, now: Optional[datetime] = None) -> datetime:
    """Naive UTC cutoff; records created before it are expired."""
    now = now or utc_now()
    return now - timedelta(days=days_to_keep)


def is_calendar_date(value: Optional[str]) -> bool:
    """DD-MMM-YYYY as used by the exchange's corporate calendar."""
    return bool(value) and bool(CALENDAR_DATE_PATTERN.match(value))


def parse_calendar_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, "%d-%b-%Y").date()
    except (TypeError, ValueError):
        return None
