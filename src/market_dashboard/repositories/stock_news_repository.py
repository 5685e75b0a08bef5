from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.db import db
from market_dashboard.models import StockNewsModel

logger = setup_logger(name="StockNewsRepository")


class StockNewsRepository:

    @staticmethod
    def insert(news_data):
        news = StockNewsModel(**news_data)
        try:
            db.session.add(news)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error storing {news_data.get('type')} news for {news_data.get('symbol')}: {e}")
            return None
        return news

    @staticmethod
    def get_gap_news(symbol, date):
        return StockNewsModel.query.filter(
            StockNewsModel.type == "GAP_ANALYSIS",
            StockNewsModel.symbol == symbol.upper(),
            StockNewsModel.date == date,
        ).order_by(StockNewsModel.created_at.desc()).first()

    @staticmethod
    def get_by_date(date, news_type=None):
        query = StockNewsModel.query.filter(StockNewsModel.date == date)
        if news_type:
            query = query.filter(StockNewsModel.type == news_type)
        return query.order_by(StockNewsModel.created_at.desc()).all()

    @staticmethod
    def search(filters):
        query = StockNewsModel.query
        if filters.get("type"):
            query = query.filter(StockNewsModel.type == filters["type"])
        if filters.get("symbol"):
            query = query.filter(StockNewsModel.symbol == filters["symbol"].upper())
        if filters.get("sector"):
            query = query.filter(StockNewsModel.sector == filters["sector"])
        if filters.get("sentiment"):
            query = query.filter(StockNewsModel.sentiment == filters["sentiment"])
        if filters.get("date"):
            query = query.filter(StockNewsModel.date == filters["date"])
        else:
            if filters.get("start_date"):
                query = query.filter(StockNewsModel.date >= filters["start_date"])
            if filters.get("end_date"):
                query = query.filter(StockNewsModel.date <= filters["end_date"])
        query = query.order_by(StockNewsModel.date.desc(), StockNewsModel.created_at.desc())
        return query.limit(filters.get("limit", StoreConfig.search_limit)).all()

    @staticmethod
    def delete_created_before(cutoff):
        try:
            num_deleted = StockNewsModel.query.filter(StockNewsModel.created_at < cutoff).delete()
            db.session.commit()
            return num_deleted
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error cleaning stock news before {cutoff}: {e}")
            return -1
