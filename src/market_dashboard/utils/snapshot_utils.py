"""
Snapshot Utilities

Normalization of ingested pre-open securities, last-write-wins selection
among documents sharing a date key, and breadth counts recomputed from
the raw securities array.
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence

from market_dashboard.config import setup_logger
from .numeric_utils import parse_numeric

logger = setup_logger(name="SnapshotUtils")

PREOPEN_NUMERIC_FIELDS = (
    "lastPrice", "finalPrice", "iep", "previousClose", "change", "pChange",
    "finalQuantity", "totalTurnover", "marketCap", "yearHigh", "yearLow",
    "totalBuyQuantity", "totalSellQuantity",
)

# Optional sub-fields stay None when absent so "no data" is distinguishable from zero
SPREAD_NUMERIC_FIELDS = (
    "bestBid", "bestAsk", "spread", "spreadPercent", "bidVolume", "askVolume",
    "totalBidVolume", "totalAskVolume", "volumeImbalancePercent", "bidAskVolumeRatio",
)


def drop_invalid_records(records: Sequence[Any], label: str = "record") -> List[Dict]:
    """Keep dict entries only, logging how many were discarded."""
    valid = [r for r in records if isinstance(r, dict)]
    skipped = len(records) - len(valid)
    if skipped:
        logger.warning(f"Skipped {skipped} malformed {label} entries")
    return valid


def normalize_spread_analysis(spread: Any) -> Optional[Dict]:
    if not isinstance(spread, dict):
        return None
    normalized = dict(spread)
    for key in SPREAD_NUMERIC_FIELDS:
        if key in normalized:
            normalized[key] = parse_numeric(normalized[key], default=None)
    side = normalized.get("volumeDominantSide")
    normalized["volumeDominantSide"] = side.upper() if isinstance(side, str) and side else None
    return normalized


def normalize_preopen_security(record: Dict) -> Dict:
    """
    Coerce the numeric fields of one pre-open security.

    Unknown fields pass through untouched; known numeric fields default to 0.
    """
    security = dict(record)
    security["symbol"] = str(record.get("symbol") or "").strip().upper()
    for key in PREOPEN_NUMERIC_FIELDS:
        if key in security:
            security[key] = parse_numeric(security[key])
    for key in ("pChange", "finalQuantity", "totalTurnover", "previousClose"):
        security.setdefault(key, 0.0)
    if "spreadAnalysis" in security:
        security["spreadAnalysis"] = normalize_spread_analysis(security["spreadAnalysis"])
    return security


def snapshot_time(document):
    return getattr(document, "created_at", None) or getattr(document, "received_at", None)


def select_latest(documents: Iterable):
    """
    Pick the most recently written document.

    Comparator: created_at, falling back to received_at. A later document
    replaces the current pick only when its timestamp is strictly greater,
    so on equal (or missing) timestamps the first document wins.

    Returns:
        The selected document, or None when the input is empty
    """
    latest = None
    latest_time = None
    for document in documents:
        doc_time = snapshot_time(document)
        if latest is None or (doc_time is not None and (latest_time is None or doc_time > latest_time)):
            latest = document
            latest_time = doc_time
    return latest


def compute_breadth(securities: Iterable[Dict]) -> Dict:
    """
    Advance/decline/unchanged counts and volume totals from pChange sign.
    """
    advances = declines = unchanged = 0
    total_volume = 0.0
    total_turnover = 0.0
    for stock in securities:
        change = parse_numeric(stock.get("pChange"))
        if change > 0:
            advances += 1
        elif change < 0:
            declines += 1
        else:
            unchanged += 1
        total_volume += parse_numeric(stock.get("finalQuantity"))
        total_turnover += parse_numeric(stock.get("totalTurnover"))
    return {
        "advances": advances,
        "declines": declines,
        "unchanged": unchanged,
        "totalVolume": total_volume,
        "totalTurnover": total_turnover,
    }


def search_by_symbol(securities: Iterable[Dict], term: str, exact: bool = False) -> List[Dict]:
    needle = (term or "").strip().upper()
    matches = []
    for stock in securities:
        symbol = str(stock.get("symbol") or "").upper()
        if not symbol:
            continue
        if (exact and symbol == needle) or (not exact and needle in symbol):
            matches.append(stock)
    return matches


def low_spread_stocks(securities: Iterable[Dict], threshold: float, limit: int) -> Dict:
    """Securities whose spread percent is at or under the threshold, tightest first."""
    rows = []
    for stock in securities:
        spread = stock.get("spreadAnalysis") or {}
        spread_percent = spread.get("spreadPercent")
        if spread_percent is None or spread_percent > threshold:
            continue
        rows.append({
            "symbol": stock.get("symbol"),
            "bidPrice": spread.get("bestBid") or 0,
            "askPrice": spread.get("bestAsk") or 0,
            "spread": spread_percent,
            "volume": stock.get("finalQuantity") or 0,
            "change": stock.get("pChange") or 0,
        })
    rows.sort(key=lambda r: r["spread"])
    return {"totalStocks": len(rows), "stocks": rows[:limit]}


def high_volume_stocks(securities: Iterable[Dict], limit: int) -> Dict:
    rows = [
        {
            "symbol": stock.get("symbol"),
            "currentVolume": stock.get("finalQuantity"),
            "price": stock.get("lastPrice") or stock.get("finalPrice") or 0,
            "change": stock.get("pChange") or 0,
            "totalTurnover": stock.get("totalTurnover") or 0,
        }
        for stock in securities
        if (stock.get("finalQuantity") or 0) > 0
    ]
    rows.sort(key=lambda r: r["currentVolume"], reverse=True)
    return {"totalStocks": len(rows), "stocks": rows[:limit]}
