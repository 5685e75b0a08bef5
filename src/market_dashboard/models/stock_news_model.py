"""
Stock News Model

AI-generated news analysis items. Append-only; expired rows are hard
deleted by the cleanup operation.
"""
import uuid

from sqlalchemy import Index

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class StockNewsModel(db.Model):
    __tablename__ = 'stock_news'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    type = db.Column(db.String(30), nullable=False)  # MARKET_ANALYSIS, GAP_ANALYSIS, SECTOR_LEADER
    symbol = db.Column(db.String(50), nullable=True)
    company_name = db.Column(db.String(255), nullable=True)
    sector = db.Column(db.String(100), nullable=True)
    date = db.Column(db.String(10), nullable=False)
    gap_percent = db.Column(db.Float, nullable=True)
    gap_type = db.Column(db.String(30), nullable=True)
    headline = db.Column(db.Text, nullable=True)
    reason = db.Column(db.Text, nullable=True)
    details = db.Column(db.Text, nullable=True)
    news_category = db.Column(db.String(30), nullable=True)
    sentiment = db.Column(db.String(20), nullable=True)
    confidence = db.Column(db.String(20), nullable=True)
    price_action = db.Column(db.String(20), nullable=True)
    source = db.Column(db.String(50), nullable=False, default='Grok AI')
    status = db.Column(db.String(20), nullable=False, default='ACTIVE')
    timestamp = db.Column(db.String(40), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_stock_news_symbol_date", "symbol", "date"),
        Index("idx_stock_news_type", "type"),
        Index("idx_stock_news_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<StockNews {self.type} {self.symbol} {self.date}>"
