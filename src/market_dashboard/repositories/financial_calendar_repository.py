from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.db import db
from market_dashboard.models import FinancialCalendarModel
from .batch_writer import insert_in_batches

logger = setup_logger(name="FinancialCalendarRepository")


class FinancialCalendarRepository:

    @staticmethod
    def get_existing_keys(symbols):
        """(symbol, event_date, purpose) triples already stored for the given symbols"""
        if not symbols:
            return set()
        rows = db.session.query(
            FinancialCalendarModel.symbol,
            FinancialCalendarModel.event_date,
            FinancialCalendarModel.purpose,
        ).filter(FinancialCalendarModel.symbol.in_(list(symbols))).all()
        return {(row[0], row[1], row[2]) for row in rows}

    @staticmethod
    def bulk_insert(entries):
        return insert_in_batches(FinancialCalendarModel, entries)

    @staticmethod
    def search(filters):
        query = FinancialCalendarModel.query
        if filters.get("symbol"):
            query = query.filter(FinancialCalendarModel.symbol.like(f"{filters['symbol'].strip().upper()}%"))
        if filters.get("company"):
            query = query.filter(FinancialCalendarModel.company.ilike(f"%{filters['company'].strip()}%"))
        if filters.get("purposes"):
            query = query.filter(FinancialCalendarModel.purpose.in_(filters["purposes"]))
        if filters.get("start_date") and filters.get("end_date"):
            query = query.filter(
                FinancialCalendarModel.event_day >= filters["start_date"],
                FinancialCalendarModel.event_day <= filters["end_date"],
            )
        return query.order_by(FinancialCalendarModel.event_day.asc(), FinancialCalendarModel.symbol.asc()).all()

    @staticmethod
    def get_all():
        return FinancialCalendarModel.query.all()

    @staticmethod
    def get_list(limit=StoreConfig.calendar_list_limit):
        return FinancialCalendarModel.query.order_by(
            FinancialCalendarModel.event_day.asc(), FinancialCalendarModel.symbol.asc()
        ).limit(limit).all()

    @staticmethod
    def get_by_id(entry_id):
        return db.session.get(FinancialCalendarModel, entry_id)

    @staticmethod
    def delete(entry):
        try:
            db.session.delete(entry)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting calendar entry {entry.id}: {e}")
            return None
        return True
