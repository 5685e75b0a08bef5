from market_dashboard.config import GapConfig, PreopenConfig, setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import PreopenRepository, StockRepository
from market_dashboard.utils import (classify_gaps, compute_breadth, drop_invalid_records, high_volume_stocks,
                                    is_date_key, low_spread_stocks, normalize_preopen_security,
                                    rank_volume_imbalance, rollup_preopen_by_taxonomy, search_by_symbol,
                                    select_latest, today_ist, utc_now)

preopen_repo = PreopenRepository()
stock_repo = StockRepository()
logger = setup_logger(name="PreopenService")

NOT_FOUND_MESSAGE = "No preopen data found for this date"
NOT_FOUND_HINT = "Please upload data for this date or select a different date"


def resolve_date(date):
    """Default to today in market time and reject malformed keys"""
    if not date:
        return today_ist()
    if not is_date_key(date):
        raise ValidationError(f"Invalid date '{date}'. Expected YYYY-MM-DD")
    return date


def _iso(value):
    return value.isoformat() + "Z" if value else None


class PreopenService:
    """
    Pre-open auction snapshots: append-only ingestion, latest-wins retrieval
    and the analyses computed on demand from the stored securities.
    """

    @staticmethod
    def _store(date, securities, **fields):
        now = utc_now()
        snapshot = preopen_repo.insert({
            "date": date,
            "securities": securities,
            "received_at": now,
            "created_at": now,
            **fields,
        })
        if snapshot is None:
            raise UpstreamError("Failed to store preopen data")
        logger.info(f"Stored preopen snapshot {snapshot.id} for {date}: {len(securities)} stocks")
        return snapshot

    def receive(self, payload):
        """
        Ingest {date?, source, data: [...]} and store a new snapshot.

        Raises:
            ValidationError: data is not a list or date is malformed
        """
        records = payload.get("data")
        if not isinstance(records, list):
            raise ValidationError("Invalid data format. Expected array of stocks.")
        date = resolve_date(payload.get("date"))
        securities = [normalize_preopen_security(r) for r in drop_invalid_records(records, "preopen")]

        snapshot = self._store(
            date,
            securities,
            timestamp=payload.get("timestamp") or _iso(utc_now()),
            source=payload.get("source") or "unknown",
            data_format="enhanced",
            total_stocks=payload.get("totalStocks") or len(securities),
            original_count=payload.get("originalCount") or len(records),
            advances=payload.get("advances") or 0,
            declines=payload.get("declines") or 0,
            unchanged=payload.get("unchanged") or 0,
            summary=payload.get("summary"),
        )
        return {
            "id": snapshot.id,
            "date": date,
            "totalStocks": len(securities),
            "timestamp": snapshot.timestamp,
        }

    def store_legacy(self, records):
        """Older scrapers post a bare array for today's date"""
        if not isinstance(records, list):
            raise ValidationError("Invalid data format. Expected array of stocks.")
        date = today_ist()
        securities = [normalize_preopen_security(r) for r in drop_invalid_records(records, "preopen")]
        snapshot = self._store(
            date,
            securities,
            timestamp=_iso(utc_now()),
            source="legacy-api",
            data_format="legacy",
            total_stocks=len(securities),
        )
        return {"id": snapshot.id, "date": date, "totalStocks": len(securities)}

    @staticmethod
    def find_latest(date):
        """Latest snapshot for the date, or None"""
        return select_latest(preopen_repo.get_by_date(date))

    def get_latest(self, date):
        snapshot = self.find_latest(date)
        if snapshot is None:
            logger.info(f"No preopen data for {date}")
            raise NotFoundError(NOT_FOUND_MESSAGE, hint=NOT_FOUND_HINT, details={"date": date})
        return snapshot

    def get_data(self, date):
        date = resolve_date(date)
        snapshot = self.get_latest(date)
        securities = snapshot.securities or []
        breadth = compute_breadth(securities)
        return {
            "id": snapshot.id,
            "date": snapshot.date,
            "timestamp": snapshot.timestamp,
            "source": snapshot.source,
            "dataFormat": snapshot.data_format,
            "totalStocks": snapshot.total_stocks or len(securities),
            "originalCount": snapshot.original_count,
            **breadth,
            "summary": snapshot.summary,
            "receivedAt": _iso(snapshot.received_at),
            "stocks": securities,
        }

    def search(self, date, symbol):
        date = resolve_date(date)
        matches = search_by_symbol(self.get_latest(date).securities or [], symbol)
        return {"searchTerm": symbol, "date": date, "totalMatches": len(matches), "stocks": matches}

    def spreads(self, date, threshold=PreopenConfig.spread_threshold):
        date = resolve_date(date)
        result = low_spread_stocks(self.get_latest(date).securities or [], threshold, PreopenConfig.top_n)
        return {"date": date, "threshold": threshold, **result}

    def volume(self, date):
        date = resolve_date(date)
        result = high_volume_stocks(self.get_latest(date).securities or [], PreopenConfig.top_n)
        return {"date": date, **result}

    def gaps(self, date, limit=GapConfig.endpoint_top_n):
        date = resolve_date(date)
        result = classify_gaps(self.get_latest(date).securities or [], limit=limit)
        logger.info(f"Gap analysis for {date}: {result['summary']}")
        return {"date": date, **result}

    def volume_imbalance(self, date):
        date = resolve_date(date)
        result = rank_volume_imbalance(self.get_latest(date).securities or [])
        return {"date": date, **result}

    def industry(self, date, level="sector", parent=None):
        date = resolve_date(date)
        snapshot = self.get_latest(date)
        taxonomy = {
            stock.symbol: {
                "sector": stock.sector or "Unknown",
                "industry": stock.industry or "Unknown",
                "basicIndustry": stock.basic_industry or "Unknown",
            }
            for stock in stock_repo.get_all()
        }
        result = rollup_preopen_by_taxonomy(snapshot.securities or [], taxonomy, level=level, parent=parent)
        logger.info(f"Industry analysis for {date}: {result['summary']['totalCategories']} categories at {level} level")
        return {"date": date, "level": level, "parentFilter": parent, **result}

    def stats(self, date):
        date = resolve_date(date)
        snapshot = self.find_latest(date)
        if snapshot is None:
            return {"hasData": False, "date": date, "message": "No preopen data available for this date"}
        stats = {
            "hasData": True,
            "date": date,
            "timestamp": snapshot.timestamp,
            "source": snapshot.source,
            "dataFormat": snapshot.data_format,
            "totalStocks": snapshot.total_stocks,
            "originalCount": snapshot.original_count,
            "advances": snapshot.advances,
            "declines": snapshot.declines,
            "unchanged": snapshot.unchanged,
            "receivedAt": _iso(snapshot.received_at),
        }
        if snapshot.summary:
            stats["summary"] = snapshot.summary
        return stats

    @staticmethod
    def dates():
        """Distinct dates, newest first, described by their latest snapshot"""
        dates = []
        seen = set()
        for snapshot in preopen_repo.get_all_ordered():
            if snapshot.date in seen:
                continue
            seen.add(snapshot.date)
            dates.append({
                "date": snapshot.date,
                "timestamp": snapshot.timestamp,
                "source": snapshot.source,
                "totalStocks": snapshot.total_stocks,
                "dataFormat": snapshot.data_format,
            })
        return {"totalDates": len(dates), "dates": dates}

    @staticmethod
    def delete(date):
        date = resolve_date(date)
        deleted = preopen_repo.delete_by_date(date)
        if deleted == -1:
            raise UpstreamError("Failed to delete preopen data")
        if deleted == 0:
            raise NotFoundError(NOT_FOUND_MESSAGE, details={"date": date})
        logger.info(f"Deleted {deleted} preopen snapshots for {date}")
        return {"date": date, "deletedCount": deleted}
