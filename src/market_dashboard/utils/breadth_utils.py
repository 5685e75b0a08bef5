"""
Breadth Utilities

Advance/decline rollups over sector and industry groupings.

Two views are built here:
    - the intraday rollup, which walks the reference sector/industry
      membership and looks up each constituent's change
    - the pre-open taxonomy rollup, which walks a pre-open snapshot and
      groups it by the stock master's sector/industry/basicIndustry
"""
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from market_dashboard.config import ReferenceGroup
from .numeric_utils import parse_numeric, round2, safe_ratio

LEVEL_FIELDS = {"sector": "sector", "industry": "industry", "basicIndustry": "basicIndustry"}

CHANGE_SOURCE_PREOPEN = "preopen"
CHANGE_SOURCE_MASTER = "stock-master"
CHANGE_SOURCE_NONE = "none"


def compute_adr(advances: int, declines: int) -> float:
    """
    Advance/decline ratio.

    advances / declines when declines > 0, otherwise the advance count
    itself. An ADR of 5 therefore reads the same for 5:1 and 5:0.
    """
    return safe_ratio(advances, declines, default=float(advances))


def resolve_change(symbol: str,
                   preopen_map: Mapping[str, Dict],
                   master_map: Mapping[str, Dict]) -> Tuple[float, str]:
    """
    Intraday change for a symbol with a three step fallback:
    pre-open pChange, then the stock master's last known pChange, then 0.
    """
    preopen = preopen_map.get(symbol)
    if preopen is not None:
        change = parse_numeric(preopen.get("pChange"), default=None)
        if change is not None:
            return change, CHANGE_SOURCE_PREOPEN
    master = master_map.get(symbol)
    if master is not None:
        change = parse_numeric(master.get("pChange"), default=None)
        if change is not None:
            return change, CHANGE_SOURCE_MASTER
    return 0.0, CHANGE_SOURCE_NONE


def _constituent_rows(groups: Iterable[ReferenceGroup],
                      preopen_map: Mapping[str, Dict],
                      master_map: Mapping[str, Dict]) -> List[Dict]:
    rows = []
    for group in groups:
        for ref in group.stocks:
            change, source = resolve_change(ref.symbol, preopen_map, master_map)
            master = master_map.get(ref.symbol) or {}
            preopen = preopen_map.get(ref.symbol) or {}
            rows.append({
                "name": group.name,
                "symbol": ref.symbol,
                "companyName": ref.company_name or master.get("companyName", ""),
                "marketCap": ref.market_cap,
                "price": parse_numeric(preopen.get("lastPrice") or master.get("lastPrice")),
                "change": change,
                "changeSource": source,
                "volume": parse_numeric(master.get("volume")),
                "preopenVolume": parse_numeric(preopen.get("finalQuantity") or preopen.get("volume")),
            })
    return rows


def _with_direction(df: pd.DataFrame) -> pd.DataFrame:
    df = df.copy()
    df["advance"] = (df["change"] > 0).astype(int)
    df["decline"] = (df["change"] < 0).astype(int)
    df["flat"] = (df["change"] == 0).astype(int)
    return df


def rollup_groups(groups: Iterable[ReferenceGroup],
                  preopen_map: Mapping[str, Dict],
                  master_map: Mapping[str, Dict],
                  average_volumes: Optional[Mapping[str, float]] = None) -> List[Dict]:
    """
    Per-group breadth for one reference taxonomy (sectors or industries).

    Parameters:
        groups: Reference groups with their constituents
        preopen_map: symbol -> pre-open security for the target date
        master_map: symbol -> stock master dict (pChange, volume, lastPrice)
        average_volumes: group name -> average pre-open volume over a trailing
            window; when absent the day's own pre-open volume is the baseline

    Returns:
        list: One row per group, in reference order
    """
    records = _constituent_rows(groups, preopen_map, master_map)
    if not records:
        return []

    df = _with_direction(pd.DataFrame(records))
    aggregated = df.groupby("name", sort=False).agg(
        advances=("advance", "sum"),
        declines=("decline", "sum"),
        unchanged=("flat", "sum"),
        totalStocks=("symbol", "count"),
        totalVolume=("volume", "sum"),
        preopenVolume=("preopenVolume", "sum"),
    )

    average_volumes = average_volumes or {}
    results = []
    for name, agg in aggregated.iterrows():
        advances, declines = int(agg["advances"]), int(agg["declines"])
        total_volume = float(agg["totalVolume"])
        preopen_volume = float(agg["preopenVolume"])
        baseline = average_volumes.get(name, preopen_volume)
        members = df[df["name"] == name]
        results.append({
            "name": name,
            "advances": advances,
            "declines": declines,
            "unchanged": int(agg["unchanged"]),
            "totalStocks": int(agg["totalStocks"]),
            "adr": compute_adr(advances, declines),
            "totalVolume": total_volume,
            "preopenVolume": preopen_volume,
            "avgPreOpenVolume": baseline,
            "volumeRatio": round2(total_volume / baseline) if baseline else None,
            "stocks": [
                {
                    "symbol": row.symbol,
                    "companyName": row.companyName,
                    "price": row.price,
                    "change": row.change,
                    "volume": row.volume,
                    "preopenVolume": row.preopenVolume,
                    "changeSource": row.changeSource,
                }
                for row in members.itertuples(index=False)
            ],
        })
    return results


def market_summary(sector_groups: Iterable[ReferenceGroup],
                   industry_groups: Iterable[ReferenceGroup],
                   preopen_map: Mapping[str, Dict],
                   master_map: Mapping[str, Dict]) -> Dict:
    """Market-wide breadth over the distinct constituents of all groups."""
    sector_groups, industry_groups = list(sector_groups), list(industry_groups)
    records = _constituent_rows(sector_groups + industry_groups, preopen_map, master_map)
    summary = {
        "totalSectors": len(sector_groups),
        "totalIndustries": len(industry_groups),
        "totalStocks": 0,
        "marketAdvances": 0,
        "marketDeclines": 0,
        "marketUnchanged": 0,
        "marketADR": 0.0,
        "changeSources": {},
    }
    if not records:
        return summary

    df = _with_direction(pd.DataFrame(records).drop_duplicates(subset="symbol"))
    advances, declines = int(df["advance"].sum()), int(df["decline"].sum())
    summary.update({
        "totalStocks": int(len(df)),
        "marketAdvances": advances,
        "marketDeclines": declines,
        "marketUnchanged": int(df["flat"].sum()),
        "marketADR": compute_adr(advances, declines),
        "changeSources": {k: int(v) for k, v in df["changeSource"].value_counts().items()},
    })
    return summary


def _buyer_seller_power(bid_volume: float, ask_volume: float) -> Tuple[str, float, str]:
    if bid_volume > ask_volume:
        ratio = safe_ratio(bid_volume, ask_volume, default=999)
        return "BUYER", ratio, f"Buyers {ratio:.1f}x Sellers"
    if ask_volume > bid_volume:
        ratio = safe_ratio(ask_volume, bid_volume, default=999)
        return "SELLER", ratio, f"Sellers {ratio:.1f}x Buyers"
    return "NEUTRAL", 0, "Balanced"


def rollup_preopen_by_taxonomy(securities: Iterable[Dict],
                               taxonomy: Mapping[str, Dict],
                               level: str = "sector",
                               parent: Optional[str] = None) -> Dict:
    """
    Group a pre-open snapshot by the stock master taxonomy.

    Securities missing from the taxonomy are skipped. With a parent filter,
    the industry level is scoped to one sector and the basicIndustry level
    to one industry.

    Returns:
        dict: {"summary": {...}, "analysis": [rows sorted by turnover desc]}
    """
    field = LEVEL_FIELDS.get(level, "basicIndustry")
    records = []
    for stock in securities:
        info = taxonomy.get(stock.get("symbol"))
        if not info:
            continue
        if parent:
            if level == "industry" and info["sector"] != parent:
                continue
            if level == "basicIndustry" and info["industry"] != parent:
                continue
        spread = stock.get("spreadAnalysis") or {}
        spread_percent = spread.get("spreadPercent")
        records.append({
            "name": info[field],
            "sector": info["sector"],
            "industry": info["industry"] if level == "basicIndustry" else None,
            "symbol": stock.get("symbol"),
            "change": parse_numeric(stock.get("pChange")),
            "volume": parse_numeric(stock.get("finalQuantity")),
            "turnover": parse_numeric(stock.get("totalTurnover")),
            "bidVolume": parse_numeric(spread.get("totalBidVolume")),
            "askVolume": parse_numeric(spread.get("totalAskVolume")),
            "spreadPercent": spread_percent,
        })

    analysis = []
    if records:
        df = _with_direction(pd.DataFrame(records))
        grouped = df.groupby("name", sort=False).agg(
            sector=("sector", "first"),
            industry=("industry", "first"),
            stockCount=("symbol", "count"),
            advances=("advance", "sum"),
            declines=("decline", "sum"),
            unchanged=("flat", "sum"),
            avgChange=("change", "mean"),
            totalVolume=("volume", "sum"),
            totalTurnover=("turnover", "sum"),
            totalBidVolume=("bidVolume", "sum"),
            totalAskVolume=("askVolume", "sum"),
            avgSpread=("spreadPercent", "mean"),
        )
        for name, agg in grouped.iterrows():
            advances, declines = int(agg["advances"]), int(agg["declines"])
            avg_change = float(agg["avgChange"])
            avg_spread = 0.0 if pd.isna(agg["avgSpread"]) else float(agg["avgSpread"])
            bid_volume, ask_volume = float(agg["totalBidVolume"]), float(agg["totalAskVolume"])
            power, ratio, text = _buyer_seller_power(bid_volume, ask_volume)
            analysis.append({
                "name": name,
                "sector": agg["sector"],
                "industry": agg["industry"] if not pd.isna(agg["industry"]) else None,
                "stockCount": int(agg["stockCount"]),
                "advances": advances,
                "declines": declines,
                "unchanged": int(agg["unchanged"]),
                "adr": compute_adr(advances, declines),
                "avgChange": round2(avg_change),
                "totalVolume": float(agg["totalVolume"]),
                "avgVolume": round(float(agg["totalVolume"]) / int(agg["stockCount"])),
                "totalTurnover": float(agg["totalTurnover"]),
                "totalBidVolume": bid_volume,
                "totalAskVolume": ask_volume,
                "buyerSellerPower": power,
                "powerRatio": ratio,
                "powerText": text,
                "avgSpread": round2(avg_spread),
                "marketSentiment": "BULLISH" if avg_change > 0 else "BEARISH" if avg_change < 0 else "NEUTRAL",
            })
        analysis.sort(key=lambda row: row["totalTurnover"], reverse=True)

    def _top(key, reverse=True):
        if not analysis:
            return "N/A"
        return sorted(analysis, key=lambda row: row[key], reverse=reverse)[0]["name"]

    summary = {
        "level": level,
        "parentFilter": parent,
        "totalCategories": len(analysis),
        "topByTurnover": _top("totalTurnover"),
        "topByVolume": _top("totalVolume"),
        "mostBullish": _top("avgChange"),
        "mostBearish": _top("avgChange", reverse=False),
    }
    return {"summary": summary, "analysis": analysis}


def average_group_volumes(snapshots: Iterable[Iterable[Dict]],
                          taxonomy: Mapping[str, Dict]) -> Dict:
    """
    Mean daily pre-open volume per sector and industry.

    Totals are divided by the number of days supplied, so a group that is
    absent on some days averages lower.

    Parameters:
        snapshots: One securities list per day
        taxonomy: symbol -> {"sector", "industry"}

    Returns:
        dict: {"sectorAverages": {name: avg}, "industryAverages": {...}, "daysAnalyzed": n}
    """
    records = []
    days = 0
    for securities in snapshots:
        days += 1
        for stock in securities:
            info = taxonomy.get(stock.get("symbol"))
            if not info:
                continue
            records.append({
                "sector": info.get("sector"),
                "industry": info.get("industry"),
                "volume": parse_numeric(stock.get("finalQuantity") or stock.get("volume")),
            })
    if not records:
        return {"sectorAverages": {}, "industryAverages": {}, "daysAnalyzed": days}

    df = pd.DataFrame(records)

    def _averages(key):
        totals = df[df[key].notna() & (df[key] != "")].groupby(key)["volume"].sum()
        return {name: round(float(total) / days) for name, total in totals.items()}

    return {
        "sectorAverages": _averages("sector"),
        "industryAverages": _averages("industry"),
        "daysAnalyzed": days,
    }
