"""
Financial Calendar Utilities

Validation of uploaded corporate-event rows. A row's Purpose may join
several purposes with "/"; each becomes its own entry tagged with the
original text.
"""
from typing import Dict, List, Set, Tuple

from .date_utils import is_calendar_date

VALID_PURPOSES = (
    "Board meeting Rescheduled",
    "Bonus",
    "Buyback",
    "Dividend",
    "Financial Results",
    "Fund Raising",
    "Other business matters",
    "Stock Split",
    "Stock split",
    "Voluntary Delisting",
    "2025 Q1 Result",
    "2025 Q2 Result",
    "2025 Q3 Result",
    "2025 Q4 Result",
)

REQUIRED_FIELDS = ("Symbol", "Company", "Purpose", "Date")

CalendarKey = Tuple[str, str, str]


def split_purposes(purpose: str) -> List[str]:
    if not purpose:
        return []
    return [p.strip() for p in str(purpose).split("/") if p.strip()]


def invalid_purposes(purposes: List[str]) -> List[str]:
    return [p for p in purposes if p not in VALID_PURPOSES]


def prepare_calendar_entries(rows: List, existing: Set[CalendarKey]) -> Tuple[List[Dict], List[str], List[str]]:
    """
    Turn uploaded rows into storable entries.

    Parameters:
        rows: Raw {Symbol, Company, Purpose, Date} dicts
        existing: (Symbol, Date, Purpose) triples already stored

    Returns:
        tuple: (entries, errors, warnings). Rows with missing fields, a bad
        date or an unknown purpose become errors; duplicates of stored or
        earlier uploaded triples become warnings and are skipped.
    """
    entries, errors, warnings = [], [], []
    seen = set(existing)

    for index, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            errors.append(f"Entry {index}: Not an object")
            continue

        missing = [f for f in REQUIRED_FIELDS if not row.get(f)]
        if missing:
            errors.append(f"Entry {index}: Missing fields - {', '.join(missing)}")
            continue

        event_date = str(row["Date"]).strip()
        if not is_calendar_date(event_date):
            errors.append(f'Entry {index}: Invalid date format "{event_date}". Expected: DD-MMM-YYYY (e.g., 10-Jul-2025)')
            continue

        original_purpose = str(row["Purpose"])
        purposes = split_purposes(original_purpose)
        bad = invalid_purposes(purposes)
        if not purposes or bad:
            errors.append(f'Entry {index}: Invalid purposes in "{original_purpose}": {", ".join(bad)}')
            continue

        if len(purposes) > 1:
            warnings.append(f'Entry {index}: "{original_purpose}" will be split into {len(purposes)} separate entries')

        symbol = str(row["Symbol"]).strip().upper()
        for purpose in purposes:
            key = (symbol, event_date, purpose)
            if key in seen:
                warnings.append(f"Entry {index}: Duplicate skipped for {symbol} - {purpose} on {event_date}")
                continue
            seen.add(key)
            entries.append({
                "symbol": symbol,
                "company": str(row["Company"]).strip(),
                "purpose": purpose,
                "event_date": event_date,
                "original_purpose": original_purpose,
            })

    return entries, errors, warnings
