"""
Webhook Models

Registered webhook endpoints and the alert events they receive. Events
carry denormalized copies of the webhook's name, tags and stock set, and
are kept when the webhook is deleted.
"""
import uuid

from sqlalchemy import Index

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class WebhookModel(db.Model):
    __tablename__ = 'webhooks'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = db.Column(db.String(255), nullable=False)
    stock_set = db.Column(db.String(20), nullable=False)  # 'NIFTY_500' or 'ANY_WEBHOOK'
    tags = db.Column(db.JSON, nullable=False, default=list)
    description = db.Column(db.Text, nullable=True)
    possible_output = db.Column(db.Text, nullable=True)
    webhook_url = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Webhook {self.name} {self.id}>"


class WebhookDataModel(db.Model):
    __tablename__ = 'webhook_data'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    webhook_id = db.Column(db.String(36), nullable=False)
    webhook_name = db.Column(db.String(255), nullable=True)
    webhook_description = db.Column(db.Text, nullable=True)
    stocks = db.Column(db.JSON, nullable=False, default=list)
    trigger_prices = db.Column(db.JSON, nullable=False, default=list)
    triggered_at = db.Column(db.String(100), nullable=True)
    scan_name = db.Column(db.String(255), nullable=True)
    scan_url = db.Column(db.String(500), nullable=True)
    alert_name = db.Column(db.String(255), nullable=True)
    date = db.Column(db.String(10), nullable=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    stock_set = db.Column(db.String(20), nullable=True)
    received_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_webhook_data_date", "date"),
        Index("idx_webhook_data_webhook_id", "webhook_id"),
    )

    def __repr__(self):
        return f"<WebhookData {self.webhook_name} {self.date}>"
