from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import setup_logger
from market_dashboard.db import db
from market_dashboard.models import WebhookModel

logger = setup_logger(name="WebhookRepository")


class WebhookRepository:

    @staticmethod
    def get_all():
        return WebhookModel.query.order_by(WebhookModel.created_at.desc()).all()

    @staticmethod
    def get_by_id(webhook_id):
        return db.session.get(WebhookModel, webhook_id)

    @staticmethod
    def create(webhook_data):
        webhook = WebhookModel(**webhook_data)
        try:
            db.session.add(webhook)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating webhook {webhook_data.get('name')}: {e}")
            return None
        return webhook

    @staticmethod
    def update(webhook, webhook_data):
        for field, value in webhook_data.items():
            setattr(webhook, field, value)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating webhook {webhook.id}: {e}")
            return None
        return webhook

    @staticmethod
    def delete(webhook):
        try:
            db.session.delete(webhook)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting webhook {webhook.id}: {e}")
            return None
        return True
