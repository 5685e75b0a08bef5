"""
Webhook Utilities

Parsing of third-party alert payloads and CSV rendering of stored events.
"""
import pandas as pd
from typing import Dict, Iterable, List, Optional

from .numeric_utils import parse_numeric


def split_csv_field(value) -> List[str]:
    """Split "AAA, BBB" into ["AAA", "BBB"]; lists pass through trimmed."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [part.strip() for part in str(value).split(",") if part.strip()]


def parse_trigger_prices(value) -> List[Optional[float]]:
    """Comma-joined prices to floats; unparseable entries become None."""
    return [parse_numeric(part, default=None) for part in split_csv_field(value)]


def parse_alert_payload(payload: Dict) -> Dict:
    """
    Extract alert fields from a scanner callback.

    Expects stocks and trigger_prices as comma-joined strings plus
    triggered_at, scan_name, scan_url and alert_name.
    """
    return {
        "stocks": split_csv_field(payload.get("stocks")),
        "trigger_prices": parse_trigger_prices(payload.get("trigger_prices")),
        "triggered_at": payload.get("triggered_at"),
        "scan_name": payload.get("scan_name"),
        "scan_url": payload.get("scan_url"),
        "alert_name": payload.get("alert_name"),
    }


EXPORT_HEADERS = ["Date", "Webhook Name", "Scanner Name", "Stocks", "Triggered At", "Tags", "Stock Set"]


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return "; ".join(str(v) for v in value)
    return str(value).replace(",", ";")


def alerts_to_csv(alerts: Iterable[Dict]) -> str:
    rows = [
        [_cell(alert.get(key)) for key in
         ("date", "webhookName", "scanName", "stocks", "triggeredAt", "tags", "stockSet")]
        for alert in alerts
    ]
    return pd.DataFrame(rows, columns=EXPORT_HEADERS).to_csv(index=False)
