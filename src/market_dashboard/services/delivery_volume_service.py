from market_dashboard.config import DeliveryConfig, setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import DeliveryVolumeRepository
from market_dashboard.utils import (drop_invalid_records, normalize_delivery_security, search_by_symbol,
                                    select_latest, serialize_delivery_security, summarize_delivery, top_delivery,
                                    utc_now)
from .preopen_service import resolve_date, NOT_FOUND_HINT

delivery_repo = DeliveryVolumeRepository()
logger = setup_logger(name="DeliveryVolumeService")

NOT_FOUND_MESSAGE = "No delivery volume data found for this date"


class DeliveryVolumeService:
    """Security-wise delivery snapshots and the top-delivery ranking"""

    @staticmethod
    def receive(payload):
        """
        Ingest {date?, source?, data: [...]}; derives per-security delivery
        percentage and the snapshot summary before storing.
        """
        records = payload.get("data")
        if not isinstance(records, list):
            raise ValidationError("Invalid data format. Expected array of securities.")
        date = resolve_date(payload.get("date"))

        now = utc_now()
        received_at = now.isoformat() + "Z"
        securities = [
            normalize_delivery_security(r, received_at)
            for r in drop_invalid_records(records, "delivery")
        ]
        summary = summarize_delivery(securities)

        snapshot = delivery_repo.insert({
            "date": date,
            "timestamp": payload.get("timestamp") or received_at,
            "source": payload.get("source") or "nse-scraper",
            "data_format": "securityWiseDP",
            "total_securities": len(securities),
            "summary": summary,
            "securities": securities,
            "received_at": now,
            "created_at": now,
        })
        if snapshot is None:
            raise UpstreamError("Failed to store delivery volume data")
        logger.info(
            f"Stored delivery snapshot {snapshot.id} for {date}: {len(securities)} securities, "
            f"market delivery ratio {summary['marketDeliveryRatio']}%"
        )
        return {
            "id": snapshot.id,
            "date": date,
            "totalSecurities": len(securities),
            "avgDeliveryPercentage": summary["avgDeliveryPercentage"],
            "highDeliveryCount": summary["highDeliveryCount"],
            "marketDeliveryRatio": summary["marketDeliveryRatio"],
            "timestamp": snapshot.timestamp,
        }

    @staticmethod
    def get_latest(date):
        snapshot = select_latest(delivery_repo.get_by_date(date))
        if snapshot is None:
            logger.info(f"No delivery volume data for {date}")
            raise NotFoundError(NOT_FOUND_MESSAGE, hint=NOT_FOUND_HINT, details={"date": date})
        return snapshot

    def get_data(self, date):
        date = resolve_date(date)
        snapshot = self.get_latest(date)
        return {
            "id": snapshot.id,
            "date": snapshot.date,
            "timestamp": snapshot.timestamp,
            "source": snapshot.source,
            "dataFormat": snapshot.data_format,
            "totalSecurities": snapshot.total_securities,
            "summary": snapshot.summary,
            "securities": [serialize_delivery_security(s) for s in snapshot.securities or []],
        }

    def search(self, date, symbol):
        date = resolve_date(date)
        matches = search_by_symbol(self.get_latest(date).securities or [], symbol, exact=True)
        if not matches:
            raise NotFoundError(f"Security {symbol} not found for date {date}")
        return {"date": date, "security": serialize_delivery_security(matches[0])}

    def top_delivery(self, date, min_percent=DeliveryConfig.default_min_percent,
                     limit=DeliveryConfig.default_limit):
        date = resolve_date(date)
        snapshot = self.get_latest(date)
        result = top_delivery(snapshot.securities or [], min_percent=min_percent, limit=limit)
        logger.info(f"Top delivery for {date}: {result['totalFound']} stocks >= {min_percent}%")
        return {
            "date": date,
            "criteria": {"minDeliveryPercent": min_percent, "limit": limit},
            **result,
            "summary": snapshot.summary,
        }

    @staticmethod
    def dates():
        dates = []
        seen = set()
        for snapshot in delivery_repo.get_all_ordered():
            if snapshot.date in seen:
                continue
            seen.add(snapshot.date)
            dates.append({
                "date": snapshot.date,
                "timestamp": snapshot.timestamp,
                "source": snapshot.source,
                "totalSecurities": snapshot.total_securities,
                "avgDeliveryPercentage": (snapshot.summary or {}).get("avgDeliveryPercentage"),
                "dataFormat": snapshot.data_format,
            })
        return {"totalDates": len(dates), "dates": dates}

    @staticmethod
    def delete(date):
        date = resolve_date(date)
        deleted = delivery_repo.delete_by_date(date)
        if deleted == -1:
            raise UpstreamError("Failed to delete delivery volume data")
        if deleted == 0:
            raise NotFoundError(NOT_FOUND_MESSAGE, details={"date": date})
        logger.info(f"Deleted {deleted} delivery snapshots for {date}")
        return {"date": date, "deletedCount": deleted}
