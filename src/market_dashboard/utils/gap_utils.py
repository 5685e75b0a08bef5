"""
Gap Utilities

Bucketing of pre-open gaps (percent change vs previous close) into four
bands. Securities with |gap| under the moderate threshold are left out.
"""
from typing import Dict, Iterable, Optional

from market_dashboard.config import GapConfig
from .numeric_utils import parse_numeric, round2

GAP_BUCKETS = ("strongGapUp", "moderateGapUp", "moderateGapDown", "strongGapDown")


def gap_bucket(gap: float,
               strong: float = GapConfig.strong_threshold,
               moderate: float = GapConfig.moderate_threshold) -> Optional[str]:
    """
    Band for a single gap value.

    g > strong                    -> strongGapUp
    moderate <= g <= strong       -> moderateGapUp
    -strong <= g <= -moderate     -> moderateGapDown
    g < -strong                   -> strongGapDown
    otherwise                     -> None
    """
    if gap > strong:
        return "strongGapUp"
    if moderate <= gap <= strong:
        return "moderateGapUp"
    if -strong <= gap <= -moderate:
        return "moderateGapDown"
    if gap < -strong:
        return "strongGapDown"
    return None


def gap_entry(stock: Dict) -> Dict:
    gap = parse_numeric(stock.get("pChange"))
    return {
        "symbol": stock.get("symbol"),
        "gap": round2(gap),
        "open": stock.get("lastPrice") or stock.get("finalPrice") or 0,
        "previousClose": stock.get("previousClose") or 0,
    }


def classify_gaps(securities: Iterable[Dict], limit: Optional[int] = GapConfig.endpoint_top_n) -> Dict:
    """
    Classify securities into gap buckets.

    Parameters:
        securities: Pre-open security dicts carrying pChange
        limit: Max entries kept per bucket (None keeps all)

    Returns:
        dict: {"summary": {<bucket>Count: n}, <bucket>: [...]} with up buckets
        sorted by gap descending and down buckets ascending. Counts are taken
        before truncation.
    """
    buckets = {name: [] for name in GAP_BUCKETS}
    for stock in securities:
        # classify on the raw value; the rounded gap is for display only
        bucket = gap_bucket(parse_numeric(stock.get("pChange")))
        if bucket:
            buckets[bucket].append(gap_entry(stock))

    buckets["strongGapUp"].sort(key=lambda e: e["gap"], reverse=True)
    buckets["moderateGapUp"].sort(key=lambda e: e["gap"], reverse=True)
    buckets["moderateGapDown"].sort(key=lambda e: e["gap"])
    buckets["strongGapDown"].sort(key=lambda e: e["gap"])

    result = {"summary": {f"{name}Count": len(entries) for name, entries in buckets.items()}}
    for name, entries in buckets.items():
        result[name] = entries if limit is None else entries[:limit]
    return result
