from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.db import db
from market_dashboard.models import WebhookDataModel

logger = setup_logger(name="WebhookDataRepository")


class WebhookDataRepository:

    @staticmethod
    def insert(alert_data):
        alert = WebhookDataModel(**alert_data)
        try:
            db.session.add(alert)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error storing alert for webhook {alert_data.get('webhook_id')}: {e}")
            return None
        return alert

    @staticmethod
    def get_by_id(alert_id):
        return db.session.get(WebhookDataModel, alert_id)

    @staticmethod
    def search(filters):
        """
        Filter stored alerts, newest date first.

        Date: exact date, or start_date/end_date bounds. Exact filters on
        webhook name, stock set and scanner. Tags live in a JSON column and
        are matched after the query, before the limit is applied.
        """
        query = WebhookDataModel.query
        if filters.get("date"):
            query = query.filter(WebhookDataModel.date == filters["date"])
        else:
            if filters.get("start_date"):
                query = query.filter(WebhookDataModel.date >= filters["start_date"])
            if filters.get("end_date"):
                query = query.filter(WebhookDataModel.date <= filters["end_date"])
        if filters.get("webhook"):
            query = query.filter(WebhookDataModel.webhook_name == filters["webhook"])
        if filters.get("stock_set"):
            query = query.filter(WebhookDataModel.stock_set == filters["stock_set"])
        if filters.get("scanner"):
            query = query.filter(WebhookDataModel.scan_name == filters["scanner"])

        query = query.order_by(WebhookDataModel.date.desc(), WebhookDataModel.received_at.desc())
        limit = filters.get("limit", StoreConfig.search_limit)
        tag = filters.get("tag")
        if not tag:
            return query.limit(limit).all() if limit else query.all()
        matches = [alert for alert in query.all() if tag in (alert.tags or [])]
        return matches[:limit] if limit else matches

    @staticmethod
    def get_scanners_and_tags():
        rows = db.session.query(WebhookDataModel.scan_name, WebhookDataModel.tags).all()
        scanners, tags = set(), set()
        for scan_name, alert_tags in rows:
            if scan_name:
                scanners.add(scan_name)
            for tag in alert_tags or []:
                tags.add(tag)
        return sorted(scanners), sorted(tags)

    @staticmethod
    def delete(alert):
        try:
            db.session.delete(alert)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting alert {alert.id}: {e}")
            return None
        return True

    @staticmethod
    def delete_many(alert_ids):
        try:
            num_deleted = WebhookDataModel.query.filter(
                WebhookDataModel.id.in_(list(alert_ids))
            ).delete(synchronize_session=False)
            db.session.commit()
            return num_deleted
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error bulk deleting alerts: {e}")
            return -1

    @staticmethod
    def count(since_date=None, on_date=None):
        query = WebhookDataModel.query
        if on_date:
            query = query.filter(WebhookDataModel.date == on_date)
        if since_date:
            query = query.filter(WebhookDataModel.date >= since_date)
        return query.count()

    @staticmethod
    def count_unique_webhooks():
        return db.session.query(func.count(func.distinct(WebhookDataModel.webhook_name))).scalar() or 0
