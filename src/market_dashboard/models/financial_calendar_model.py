import uuid

from sqlalchemy import Index

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class FinancialCalendarModel(db.Model):
    """Corporate event; event_date keeps the DD-MMM-YYYY text, event_day its parsed date"""
    __tablename__ = 'financial_calendar'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    symbol = db.Column(db.String(50), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    purpose = db.Column(db.String(100), nullable=False)
    event_date = db.Column(db.String(11), nullable=False)
    event_day = db.Column(db.Date, nullable=True)
    original_purpose = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("idx_financial_calendar_key", "symbol", "event_date", "purpose"),
        Index("idx_financial_calendar_event_day", "event_day"),
    )

    def __repr__(self):
        return f"<FinancialCalendar {self.symbol} {self.purpose} {self.event_date}>"
