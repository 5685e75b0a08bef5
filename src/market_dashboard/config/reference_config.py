"""
Reference Config

Sector and industry membership used by the intraday rollup. The data is
loaded once into an immutable ReferenceData object; a reload builds a new
object rather than mutating the existing one.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class ReferenceStock:
    symbol: str
    company_name: str = ""
    market_cap: float = 0.0


@dataclass(frozen=True)
class ReferenceGroup:
    """
    One sector or industry with its constituent stocks.

    Attributes:
        name: Sector or industry name
        stocks: Constituents, ordered by market cap (descending)
        total_market_cap: Sum of constituent market caps
    """
    name: str
    stocks: Tuple[ReferenceStock, ...] = ()
    total_market_cap: float = 0.0

    @property
    def stock_count(self) -> int:
        return len(self.stocks)

    @property
    def symbols(self) -> List[str]:
        return [s.symbol for s in self.stocks]


@dataclass(frozen=True)
class ReferenceData:
    sectors: Tuple[ReferenceGroup, ...] = ()
    industries: Tuple[ReferenceGroup, ...] = ()
    source: str = "empty"
    loaded_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def is_empty(self) -> bool:
        return not self.sectors and not self.industries

    def summary(self) -> Dict:
        return {
            "source": self.source,
            "loadedAt": self.loaded_at,
            "sectors": len(self.sectors),
            "industries": len(self.industries),
            "sectorStocks": sum(g.stock_count for g in self.sectors),
            "industryStocks": sum(g.stock_count for g in self.industries),
        }
