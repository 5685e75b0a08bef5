import pandas as pd

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import StockRepository
from market_dashboard.utils import parse_numeric

stock_repo = StockRepository()
logger = setup_logger(name="StockService")

# Column headers of the exchange's index constituent sheet
IMPORT_COLUMNS = {
    "Company Name": "company_name",
    "Symbol": "symbol",
    "Macro Economic Classification": "macro_economic_classification",
    "Sector": "sector",
    "Industry": "industry",
    "Basic Industry": "basic_industry",
    "Market Cap": "market_cap",
    "Free Float Market Cap": "free_float_market_cap",
}
NUMERIC_FIELDS = ("market_cap", "free_float_market_cap")
QUOTE_FIELDS = ("last_price", "p_change", "volume")
TEXT_FIELDS = ("company_name", "macro_economic_classification", "sector", "industry", "basic_industry")
FILTER_FIELDS = {
    "sectors": "sector",
    "industries": "industry",
    "basicIndustries": "basic_industry",
    "macroClassifications": "macro_economic_classification",
}
EXPORT_COLUMNS = [
    ("symbol", "Symbol"),
    ("companyName", "Company Name"),
    ("macroEconomicClassification", "Macro Economic Classification"),
    ("sector", "Sector"),
    ("industry", "Industry"),
    ("basicIndustry", "Basic Industry"),
    ("marketCap", "Market Cap"),
    ("freeFloatMarketCap", "Free Float Market Cap"),
]
TOP_PER_GROUP = 5


def _clean(stock_data):
    """Strip text, upper-case the symbol and coerce numerics"""
    cleaned = {}
    for field, value in stock_data.items():
        if field == "symbol":
            cleaned[field] = str(value).strip().upper() if value else value
        elif field in NUMERIC_FIELDS:
            cleaned[field] = parse_numeric(value)
        elif field in QUOTE_FIELDS:
            cleaned[field] = parse_numeric(value, default=None)
        elif field in TEXT_FIELDS:
            cleaned[field] = str(value).strip() if value is not None else None
    return cleaned


def _stock_frame(stocks):
    return pd.DataFrame([s.to_dict() for s in stocks])


class StockService:
    """Stock master CRUD, search, rankings and spreadsheet-row import"""

    @staticmethod
    def _get_or_404(stock_id):
        stock = stock_repo.get_by_id(stock_id)
        if stock is None:
            raise NotFoundError("Stock not found")
        return stock

    def get(self, stock_id):
        return self._get_or_404(stock_id)

    @staticmethod
    def create(stock_data):
        stock_data = _clean(stock_data)
        if not stock_data.get("symbol") or not stock_data.get("company_name"):
            raise ValidationError("Symbol and company name are required")
        if stock_repo.get_by_symbol(stock_data["symbol"]):
            raise ValidationError("Stock with this symbol already exists")
        stock = stock_repo.create(stock_data)
        if stock is None:
            raise UpstreamError("Failed to create stock")
        logger.info(f"Created stock {stock.symbol}")
        return stock

    def update(self, stock_id, stock_data):
        stock = self._get_or_404(stock_id)
        stock_data = _clean(stock_data)
        new_symbol = stock_data.get("symbol")
        if new_symbol and new_symbol != stock.symbol:
            existing = stock_repo.get_by_symbol(new_symbol)
            if existing and existing.id != stock.id:
                raise ValidationError("Stock with this symbol already exists")
        updated = stock_repo.update(stock, stock_data)
        if updated is None:
            raise UpstreamError("Failed to update stock")
        return updated

    def delete(self, stock_id):
        stock = self._get_or_404(stock_id)
        if stock_repo.delete(stock) is None:
            raise UpstreamError("Failed to delete stock")
        logger.info(f"Deleted stock {stock.symbol}")

    @staticmethod
    def list():
        return stock_repo.get_all()

    @staticmethod
    def search(filters):
        filters = dict(filters)
        filters.setdefault("limit", StoreConfig.search_limit)
        filters.setdefault("offset", 0)
        stocks, total = stock_repo.search(filters)
        return {
            "stocks": stocks,
            "pagination": {
                "total": total,
                "limit": filters["limit"],
                "offset": filters["offset"],
                "hasMore": filters["offset"] + len(stocks) < total,
            },
        }

    @staticmethod
    def filter_options():
        options = {key: stock_repo.get_distinct(field) for key, field in FILTER_FIELDS.items()}
        options["marketCapStats"] = stock_repo.get_market_cap_stats()
        return options

    @staticmethod
    def stats():
        return {
            "totalStocks": stock_repo.count(),
            "sectors": len(stock_repo.get_distinct("sector")),
            "industries": len(stock_repo.get_distinct("industry")),
            "marketCapStats": stock_repo.get_market_cap_stats(),
        }

    @staticmethod
    def symbols():
        return [stock.symbol for stock in stock_repo.get_all()]

    @staticmethod
    def export_csv():
        df = _stock_frame(stock_repo.get_all())
        if df.empty:
            return pd.DataFrame(columns=[label for _, label in EXPORT_COLUMNS]).to_csv(index=False)
        df = df[[key for key, _ in EXPORT_COLUMNS]].rename(columns=dict(EXPORT_COLUMNS))
        return df.to_csv(index=False)

    @staticmethod
    def top_by_group(group_field, top_n=TOP_PER_GROUP):
        """
        Largest stocks by market cap within each sector or industry.

        Parameters:
            group_field (str): "sector" or "industry"
            top_n (int): Stocks kept per group

        Returns:
            dict: group name -> {totalMarketCap, stockCount, stocks}, ordered
            by the group's total market cap descending
        """
        df = _stock_frame(stock_repo.get_with_market_cap())
        if df.empty:
            return {}
        df[group_field] = df[group_field].fillna("Unknown").replace("", "Unknown")
        df = df.sort_values(["marketCap", "symbol"], ascending=[False, True])

        totals = df.groupby(group_field)["marketCap"].agg(["sum", "count"]).sort_values("sum", ascending=False)
        result = {}
        for name, row in totals.iterrows():
            members = df[df[group_field] == name].head(top_n)
            members = members.astype(object).where(members.notna(), None)
            result[name] = {
                "totalMarketCap": float(row["sum"]),
                "stockCount": int(row["count"]),
                "stocks": members.to_dict(orient="records"),
            }
        return result

    @staticmethod
    def top_overall(limit=10):
        return [stock.to_dict() for stock in stock_repo.get_top_by_market_cap(limit)]

    @staticmethod
    def import_rows(rows):
        """
        Upsert stocks from spreadsheet rows keyed by the sheet's column headers.

        Rows without a symbol or company name are reported and skipped.
        """
        if not isinstance(rows, list) or not rows:
            raise ValidationError("Data must be a non-empty array of rows")

        skipped = []
        seen = {}
        for index, row in enumerate(rows, start=1):
            if not isinstance(row, dict):
                skipped.append(f"Row {index}: Not an object")
                continue
            mapped = _clean({field: row.get(column) for column, field in IMPORT_COLUMNS.items()})
            if not mapped.get("symbol") or not mapped.get("company_name"):
                skipped.append(f"Row {index}: Missing Symbol or Company Name")
                continue
            # Last row wins for a symbol repeated in one upload
            seen[mapped["symbol"]] = mapped
        stock_rows = list(seen.values())

        result = stock_repo.upsert_many(stock_rows)
        logger.info(
            f"Stock import: {result['created']} created, {result['updated']} updated, "
            f"{len(skipped)} skipped, {len(result['errors'])} failed batches"
        )
        return {
            "totalRows": len(rows),
            "created": result["created"],
            "updated": result["updated"],
            "skipped": skipped[:20] or None,
            "errors": result["errors"] or None,
        }
