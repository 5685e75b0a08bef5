"""
Stock Model

Stock master: one row per listed symbol with its sector/industry taxonomy
and market cap. last_price, p_change and volume hold the last known quote
and feed the intraday change fallback.
"""
import uuid

from sqlalchemy import Index

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class StockModel(db.Model):
    __tablename__ = 'stocks'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    symbol = db.Column(db.String(50), nullable=False, unique=True)
    company_name = db.Column(db.String(255), nullable=False)
    macro_economic_classification = db.Column(db.String(100), nullable=True)
    sector = db.Column(db.String(100), nullable=True)
    industry = db.Column(db.String(100), nullable=True)
    basic_industry = db.Column(db.String(100), nullable=True)
    market_cap = db.Column(db.Float, nullable=False, default=0)
    free_float_market_cap = db.Column(db.Float, nullable=False, default=0)
    last_price = db.Column(db.Float, nullable=True)
    p_change = db.Column(db.Float, nullable=True)
    volume = db.Column(db.Float, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("idx_stocks_sector", "sector"),
        Index("idx_stocks_industry", "industry"),
    )

    def __repr__(self):
        return f"<Stock {self.symbol}>"

    def to_dict(self):
        return {
            "id": self.id,
            "symbol": self.symbol,
            "companyName": self.company_name,
            "macroEconomicClassification": self.macro_economic_classification,
            "sector": self.sector,
            "industry": self.industry,
            "basicIndustry": self.basic_industry,
            "marketCap": self.market_cap,
            "freeFloatMarketCap": self.free_float_market_cap,
            "lastPrice": self.last_price,
            "pChange": self.p_change,
            "volume": self.volume,
        }
