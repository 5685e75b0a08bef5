from market_dashboard.config import setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import WebhookDataRepository
from market_dashboard.utils import alerts_to_csv, shift_date_key, today_ist

webhook_data_repo = WebhookDataRepository()
logger = setup_logger(name="WebhookDataService")


def alert_to_dict(alert):
    return {
        "id": alert.id,
        "webhookId": alert.webhook_id,
        "webhookName": alert.webhook_name,
        "webhookDescription": alert.webhook_description,
        "stocks": alert.stocks or [],
        "triggerPrices": alert.trigger_prices or [],
        "triggeredAt": alert.triggered_at,
        "scanName": alert.scan_name,
        "scanUrl": alert.scan_url,
        "alertName": alert.alert_name,
        "date": alert.date,
        "tags": alert.tags or [],
        "stockSet": alert.stock_set,
    }


class WebhookDataService:

    @staticmethod
    def search(filters):
        return webhook_data_repo.search(filters)

    @staticmethod
    def search_options():
        scanners, tags = webhook_data_repo.get_scanners_and_tags()
        return {"scanners": scanners, "tags": tags}

    @staticmethod
    def get(alert_id):
        alert = webhook_data_repo.get_by_id(alert_id)
        if alert is None:
            raise NotFoundError("Data not found")
        return alert

    def delete(self, alert_id):
        alert = self.get(alert_id)
        if webhook_data_repo.delete(alert) is None:
            raise UpstreamError("Failed to delete data")

    @staticmethod
    def bulk_delete(alert_ids):
        if not isinstance(alert_ids, list) or not alert_ids:
            raise ValidationError("Invalid IDs provided")
        deleted = webhook_data_repo.delete_many(alert_ids)
        if deleted == -1:
            raise UpstreamError("Failed to delete data")
        logger.info(f"Bulk deleted {deleted} alerts")
        return deleted

    @staticmethod
    def export_csv(filters):
        alerts = webhook_data_repo.search({**filters, "limit": None})
        return alerts_to_csv(alert_to_dict(a) for a in alerts)

    @staticmethod
    def overview():
        today = today_ist()
        return {
            "totalData": webhook_data_repo.count(),
            "todayData": webhook_data_repo.count(on_date=today),
            "weekData": webhook_data_repo.count(since_date=shift_date_key(today, -7)),
            "uniqueWebhooks": webhook_data_repo.count_unique_webhooks(),
        }
