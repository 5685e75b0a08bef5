"""
Delivery Utilities

Delivery percentage derivation, snapshot summary and top-delivery ranking.
Percentages are kept as floats; the two-decimal string is produced only when
a security is serialized for the data/search endpoints.
"""
from typing import Dict, Iterable, List

from market_dashboard.config import DeliveryConfig
from .numeric_utils import parse_numeric, round2, format_percentage, safe_ratio

PRICE_FIELDS = (
    "lastPrice", "open", "dayHigh", "dayLow", "previousClose",
    "marketDaysHigh", "marketDaysLow", "change", "pChange", "perChange365d",
    "totalTradedVolume", "totalTradedValue",
)


def delivery_percentage(quantity_traded: float, delivery_quantity: float) -> float:
    """deliveryQuantity / quantityTraded * 100, or 0 when nothing traded."""
    if quantity_traded > 0:
        return round2(delivery_quantity / quantity_traded * 100)
    return 0.0


def normalize_delivery_security(record: Dict, received_at: str) -> Dict:
    quantity_traded = parse_numeric(record.get("quantityTraded"))
    delivery_quantity = parse_numeric(record.get("deliveryQuantity"))
    percentage = delivery_percentage(quantity_traded, delivery_quantity)

    security = {
        "symbol": str(record.get("symbol") or "").strip().upper(),
        "series": record.get("series") or "EQ",
        "isin": record.get("isin") or "",
        "quantityTraded": quantity_traded,
        "deliveryQuantity": delivery_quantity,
        "deliveryToTradedQuantity": parse_numeric(record.get("deliveryToTradedQuantity"), default=percentage),
        "deliveryPercentage": percentage,
    }
    for key in PRICE_FIELDS:
        security[key] = parse_numeric(record.get(key))
    security["lastUpdateTime"] = record.get("lastUpdateTime") or received_at
    return security


def summarize_delivery(securities: List[Dict]) -> Dict:
    """
    Snapshot-level delivery summary.

    avgDeliveryPercentage is the plain mean of per-security percentages;
    marketDeliveryRatio is volume weighted (sum of delivered over sum of traded).
    """
    total_traded = sum(s["quantityTraded"] for s in securities)
    total_delivery = sum(s["deliveryQuantity"] for s in securities)
    total_value = sum(s.get("totalTradedValue", 0) for s in securities)
    percentages = [s["deliveryPercentage"] for s in securities]

    return {
        "avgDeliveryPercentage": round2(safe_ratio(sum(percentages), len(percentages))),
        "highDeliveryCount": sum(1 for p in percentages if p > DeliveryConfig.high_percent),
        "veryHighDeliveryCount": sum(1 for p in percentages if p > DeliveryConfig.very_high_percent),
        "totalTradedVolume": total_traded,
        "totalDeliveryVolume": total_delivery,
        "totalTradedValue": total_value,
        "marketDeliveryRatio": market_delivery_ratio(securities),
    }


def market_delivery_ratio(securities: Iterable[Dict]) -> float:
    total_traded = 0.0
    total_delivery = 0.0
    for s in securities:
        total_traded += parse_numeric(s.get("quantityTraded"))
        total_delivery += parse_numeric(s.get("deliveryQuantity"))
    if total_traded <= 0:
        return 0.0
    return round2(total_delivery / total_traded * 100)


def delivery_tier(percentage: float) -> str:
    if percentage >= DeliveryConfig.very_high_percent:
        return "VERY_HIGH"
    if percentage >= DeliveryConfig.high_percent:
        return "HIGH"
    if percentage >= DeliveryConfig.default_min_percent:
        return "MODERATE"
    return "LOW"


def top_delivery(securities: Iterable[Dict],
                 min_percent: float = DeliveryConfig.default_min_percent,
                 limit: int = DeliveryConfig.default_limit) -> Dict:
    """
    Securities with deliveryPercentage >= min_percent, highest first.

    Returns:
        dict: {"totalFound", "topDeliveryStocks", "tiers"} where tiers counts
        veryHigh/high/moderate over the returned rows.
    """
    candidates = []
    for s in securities:
        percentage = parse_numeric(s.get("deliveryPercentage"))
        if percentage >= min_percent:
            candidates.append((percentage, s))
    candidates.sort(key=lambda pair: pair[0], reverse=True)

    rows = []
    for percentage, s in candidates[:limit]:
        rows.append({
            "symbol": s.get("symbol"),
            "series": s.get("series"),
            "deliveryPercentage": percentage,
            "deliveryTier": delivery_tier(percentage),
            "quantityTraded": s.get("quantityTraded"),
            "deliveryQuantity": s.get("deliveryQuantity"),
            "lastPrice": s.get("lastPrice"),
            "pChange": s.get("pChange"),
            "totalTradedValue": s.get("totalTradedValue"),
            "totalTradedVolume": s.get("totalTradedVolume"),
        })

    tiers = {"veryHigh": 0, "high": 0, "moderate": 0}
    for row in rows:
        p = row["deliveryPercentage"]
        if p >= DeliveryConfig.very_high_percent:
            tiers["veryHigh"] += 1
        elif p >= DeliveryConfig.high_percent:
            tiers["high"] += 1
        elif p >= DeliveryConfig.default_min_percent:
            tiers["moderate"] += 1

    return {"totalFound": len(rows), "topDeliveryStocks": rows, "tiers": tiers}


def serialize_delivery_security(security: Dict) -> Dict:
    """Copy of a stored security with deliveryPercentage rendered as "12.34"."""
    rendered = dict(security)
    rendered["deliveryPercentage"] = format_percentage(security.get("deliveryPercentage"))
    return rendered
