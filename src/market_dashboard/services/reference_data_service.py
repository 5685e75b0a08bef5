import json
import os
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from market_dashboard.config import ReferenceData, ReferenceGroup, ReferenceStock, setup_logger
from market_dashboard.errors import UpstreamError, ValidationError
from market_dashboard.repositories import StockRepository
from market_dashboard.utils import parse_numeric

stock_repo = StockRepository()
logger = setup_logger(name="ReferenceDataService")

RELOAD_SOURCES = ("files", "stock-master")


def _parse_group(entry: Dict) -> Optional[ReferenceGroup]:
    name = (entry.get("name") or "").strip()
    if not name:
        return None
    stocks = tuple(
        ReferenceStock(
            symbol=str(s.get("symbol", "")).strip().upper(),
            company_name=s.get("companyName", "") or "",
            market_cap=parse_numeric(s.get("marketCap")),
        )
        for s in entry.get("stocks", [])
        if isinstance(s, dict) and s.get("symbol")
    )
    total = entry.get("totalMarketCap")
    total_market_cap = parse_numeric(total) if total is not None else sum(s.market_cap for s in stocks)
    return ReferenceGroup(name=name, stocks=stocks, total_market_cap=total_market_cap)


def _load_groups(path: Optional[str], strict: bool = False) -> Tuple[ReferenceGroup, ...]:
    """
    Read one reference document.

    A missing file yields no groups. An unreadable or malformed file is
    logged and yields no groups, or raises UpstreamError when strict.
    """
    if not path or not os.path.exists(path):
        logger.warning(f"Reference file not found: {path}")
        return ()
    try:
        with open(path, "r", encoding="utf-8") as fh:
            payload = json.load(fh)
        if isinstance(payload, dict):
            payload = payload.get("data", [])
        if not isinstance(payload, list):
            raise ValueError("expected a list of groups")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load reference file {path}: {e}")
        if strict:
            raise UpstreamError(f"Failed to load reference file {os.path.basename(path)}", cause=e)
        return ()
    groups = [_parse_group(entry) for entry in payload if isinstance(entry, dict)]
    return tuple(g for g in groups if g is not None)


def load_reference_data(sector_path: Optional[str], industry_path: Optional[str],
                        strict: bool = False) -> ReferenceData:
    """
    Load sector and industry reference documents from JSON files.

    Each file holds a list of {name, stockCount, totalMarketCap,
    stocks: [{symbol, companyName, marketCap}]}. Missing files yield
    empty groups.
    """
    sectors = _load_groups(sector_path, strict=strict)
    industries = _load_groups(industry_path, strict=strict)
    logger.info(f"Loaded reference data: {len(sectors)} sectors, {len(industries)} industries")
    return ReferenceData(sectors=sectors, industries=industries, source="files")


def _group_stocks(stocks: Iterable[Dict], key: str) -> Tuple[ReferenceGroup, ...]:
    buckets: Dict[str, List[ReferenceStock]] = {}
    for stock in stocks:
        name = (stock.get(key) or "").strip()
        if not name:
            continue
        buckets.setdefault(name, []).append(ReferenceStock(
            symbol=stock["symbol"],
            company_name=stock.get("companyName", "") or "",
            market_cap=parse_numeric(stock.get("marketCap")),
        ))
    groups = []
    for name in sorted(buckets):
        members = sorted(buckets[name], key=lambda s: (-s.market_cap, s.symbol))
        groups.append(ReferenceGroup(
            name=name,
            stocks=tuple(members),
            total_market_cap=sum(s.market_cap for s in members),
        ))
    return tuple(groups)


def build_reference_data(stocks: Iterable[Dict]) -> ReferenceData:
    """Derive sector/industry groups from stock master dicts."""
    stocks = [s for s in stocks if s.get("symbol")]
    return ReferenceData(
        sectors=_group_stocks(stocks, "sector"),
        industries=_group_stocks(stocks, "industry"),
        source="stock-master",
    )


class ReferenceDataService:
    """
    Holds the current sector/industry ReferenceData.

    The object itself is immutable; reload() builds a replacement and swaps
    the reference under a lock, so readers holding the old object keep a
    consistent view. A reload that fails leaves the current data in place.
    """

    def __init__(self, sector_path, industry_path, reference=None):
        self.sector_path = sector_path
        self.industry_path = industry_path
        self._lock = threading.Lock()
        self._current = reference if reference is not None else load_reference_data(sector_path, industry_path)

    @property
    def current(self) -> ReferenceData:
        return self._current

    def reload(self, source="files"):
        """
        Rebuild reference data from the JSON files or from the stock master.

        Returns:
            dict: Summary of the newly installed reference data
        """
        if source not in RELOAD_SOURCES:
            raise ValidationError(f"Invalid source '{source}'. Expected one of: {', '.join(RELOAD_SOURCES)}")
        if source == "stock-master":
            reference = build_reference_data(stock.to_dict() for stock in stock_repo.get_all())
        else:
            reference = load_reference_data(self.sector_path, self.industry_path, strict=True)
        with self._lock:
            self._current = reference
        logger.info(f"Reference data reloaded from {source}: {reference.summary()}")
        return reference.summary()
