"""
Volume Imbalance Utilities

Partitions pre-open securities by order-book dominant side and ranks each
side by imbalance percent. The imbalance itself is computed upstream.
"""
from typing import Dict, Iterable

from market_dashboard.config import ImbalanceConfig


def imbalance_entry(stock: Dict, spread: Dict) -> Dict:
    return {
        "symbol": stock.get("symbol"),
        "lastPrice": stock.get("lastPrice"),
        "pChange": stock.get("pChange"),
        "bidAskVolumeRatioText": spread.get("bidAskVolumeRatioText") or "N/A",
        "volumeDominantSide": spread.get("volumeDominantSide"),
        "volumeImbalancePercent": spread.get("volumeImbalancePercent"),
        "bidVolume": spread.get("bidVolume") or 0,
        "askVolume": spread.get("askVolume") or 0,
        "totalBidVolume": spread.get("totalBidVolume") or 0,
        "totalAskVolume": spread.get("totalAskVolume") or 0,
        "spreadPercent": spread.get("spreadPercent") or 0,
    }


def rank_volume_imbalance(securities: Iterable[Dict],
                          top_n: int = ImbalanceConfig.top_n,
                          strong_percent: float = ImbalanceConfig.strong_percent) -> Dict:
    """
    Rank bid- and ask-dominant securities.

    Securities without spreadAnalysis, without an imbalance percent or with a
    dominant side other than BID/ASK are dropped.

    Returns:
        dict: {"summary": {totalBidDominant, totalAskDominant,
        strongBidImbalance, strongAskImbalance}, "bidDominantStocks": [...],
        "askDominantStocks": [...]}, each list sorted by imbalance descending
        and cut to top_n
    """
    sides = {"BID": [], "ASK": []}
    for stock in securities:
        spread = stock.get("spreadAnalysis")
        if not spread or spread.get("volumeImbalancePercent") is None:
            continue
        side = spread.get("volumeDominantSide")
        if side in sides:
            sides[side].append(imbalance_entry(stock, spread))

    for entries in sides.values():
        entries.sort(key=lambda e: e["volumeImbalancePercent"], reverse=True)

    bid, ask = sides["BID"], sides["ASK"]
    return {
        "summary": {
            "totalBidDominant": len(bid),
            "totalAskDominant": len(ask),
            "strongBidImbalance": sum(1 for e in bid if e["volumeImbalancePercent"] > strong_percent),
            "strongAskImbalance": sum(1 for e in ask if e["volumeImbalancePercent"] > strong_percent),
        },
        "bidDominantStocks": bid[:top_n],
        "askDominantStocks": ask[:top_n],
    }
