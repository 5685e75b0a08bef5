import uuid

from market_dashboard.config import setup_logger
from market_dashboard.errors import NotFoundError, UpstreamError, ValidationError
from market_dashboard.repositories import WebhookDataRepository, WebhookRepository
from market_dashboard.utils import parse_alert_payload, today_ist, utc_now

webhook_repo = WebhookRepository()
webhook_data_repo = WebhookDataRepository()
logger = setup_logger(name="WebhookService")

STOCK_SETS = ("NIFTY_500", "ANY_WEBHOOK")
UPDATABLE_FIELDS = ("name", "stock_set", "tags", "description", "possible_output")


def build_webhook_url(webhook_id, host_url, public_base_url=None, production=False):
    """
    Callback URL handed to the third-party scanner.

    PUBLIC_BASE_URL wins over the request host; production always uses https.
    """
    base = (public_base_url or host_url).rstrip("/")
    if production and base.startswith("http://"):
        base = "https://" + base[len("http://"):]
    return f"{base}/api/webhooks/receive/{webhook_id}"


class WebhookService:
    """Webhook registry plus the receiver that stores alert events"""

    @staticmethod
    def _get_or_404(webhook_id):
        webhook = webhook_repo.get_by_id(webhook_id)
        if webhook is None:
            raise NotFoundError("Webhook not found")
        return webhook

    def create(self, webhook_data, host_url, public_base_url=None, production=False):
        if webhook_data.get("stock_set") not in STOCK_SETS:
            raise ValidationError(f"stockSet must be one of: {', '.join(STOCK_SETS)}")
        webhook_id = str(uuid.uuid4())
        webhook = webhook_repo.create({
            "id": webhook_id,
            "name": webhook_data["name"],
            "stock_set": webhook_data["stock_set"],
            "tags": webhook_data.get("tags") or [],
            "description": webhook_data.get("description") or "",
            "possible_output": webhook_data.get("possible_output") or "",
            "webhook_url": build_webhook_url(webhook_id, host_url, public_base_url, production),
        })
        if webhook is None:
            raise UpstreamError("Failed to create webhook")
        logger.info(f"Created webhook {webhook.name} ({webhook.id})")
        return webhook

    def update(self, webhook_id, webhook_data):
        webhook = self._get_or_404(webhook_id)
        updates = {k: v for k, v in webhook_data.items() if k in UPDATABLE_FIELDS}
        if "stock_set" in updates and updates["stock_set"] not in STOCK_SETS:
            raise ValidationError(f"stockSet must be one of: {', '.join(STOCK_SETS)}")
        updated = webhook_repo.update(webhook, updates)
        if updated is None:
            raise UpstreamError("Failed to update webhook")
        return updated

    def update_possible_output(self, webhook_id, possible_output):
        return self.update(webhook_id, {"possible_output": possible_output or ""})

    def delete(self, webhook_id):
        """Stored alerts of the webhook are kept"""
        webhook = self._get_or_404(webhook_id)
        if webhook_repo.delete(webhook) is None:
            raise UpstreamError("Failed to delete webhook")
        logger.info(f"Deleted webhook {webhook_id}")

    def get(self, webhook_id):
        return self._get_or_404(webhook_id)

    @staticmethod
    def list():
        return webhook_repo.get_all()

    @staticmethod
    def possible_outputs():
        return [
            {
                "webhookId": w.id,
                "webhookName": w.name,
                "possibleOutput": w.possible_output or "",
                "description": w.description or "",
            }
            for w in webhook_repo.get_all()
        ]

    def receive(self, webhook_id, payload):
        """
        Store one alert event for the webhook.

        Each call appends a new record; repeated deliveries are not merged.
        """
        webhook = self._get_or_404(webhook_id)
        alert = parse_alert_payload(payload or {})
        stored = webhook_data_repo.insert({
            "webhook_id": webhook.id,
            "webhook_name": webhook.name,
            "webhook_description": webhook.description or "",
            "stocks": alert["stocks"],
            "trigger_prices": alert["trigger_prices"],
            "triggered_at": alert["triggered_at"],
            "scan_name": alert["scan_name"],
            "scan_url": alert["scan_url"],
            "alert_name": alert["alert_name"],
            "date": today_ist(),
            "tags": list(webhook.tags or []),
            "stock_set": webhook.stock_set,
            "received_at": utc_now(),
        })
        if stored is None:
            raise UpstreamError("Failed to store webhook data")
        logger.info(f"Webhook {webhook.name} received {len(alert['stocks'])} stocks from {alert['scan_name']}")
        return stored
