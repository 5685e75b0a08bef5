from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import StoreConfig, setup_logger
from market_dashboard.db import db
from market_dashboard.models import StockModel

logger = setup_logger(name="StockRepository")


class StockRepository:

    @staticmethod
    def get_all():
        return StockModel.query.order_by(StockModel.symbol.asc()).all()

    @staticmethod
    def get_by_id(stock_id):
        return db.session.get(StockModel, stock_id)

    @staticmethod
    def get_by_symbol(symbol):
        return StockModel.query.filter(StockModel.symbol == symbol.upper()).first()

    @staticmethod
    def get_by_symbols(symbols):
        if not symbols:
            return []
        return StockModel.query.filter(StockModel.symbol.in_(list(symbols))).all()

    @staticmethod
    def create(stock_data):
        stock = StockModel(**stock_data)
        try:
            db.session.add(stock)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error creating stock {stock_data.get('symbol')}: {e}")
            return None
        return stock

    @staticmethod
    def update(stock, stock_data):
        for field, value in stock_data.items():
            setattr(stock, field, value)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error updating stock {stock.symbol}: {e}")
            return None
        return stock

    @staticmethod
    def delete(stock):
        try:
            db.session.delete(stock)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting stock {stock.symbol}: {e}")
            return None
        return True

    @staticmethod
    def upsert_many(stock_rows, batch_size=StoreConfig.batch_write_limit):
        """
        Create or update stocks by symbol, committing every batch_size rows.

        Returns:
            dict: {"created", "updated", "errors"}; rows of a failed batch are
            counted in errors and earlier batches stay committed
        """
        created = updated = 0
        errors = []
        for start in range(0, len(stock_rows), batch_size):
            chunk = stock_rows[start:start + batch_size]
            existing = {
                s.symbol: s for s in StockModel.query.filter(
                    StockModel.symbol.in_([row["symbol"] for row in chunk])
                ).all()
            }
            chunk_created = chunk_updated = 0
            try:
                for row in chunk:
                    stock = existing.get(row["symbol"])
                    if stock:
                        for field, value in row.items():
                            setattr(stock, field, value)
                        chunk_updated += 1
                    else:
                        stock = StockModel(**row)
                        db.session.add(stock)
                        existing[row["symbol"]] = stock
                        chunk_created += 1
                db.session.commit()
                created += chunk_created
                updated += chunk_updated
            except SQLAlchemyError as e:
                db.session.rollback()
                logger.error(f"Error importing stocks at offset {start}: {e}")
                errors.append(f"Rows {start + 1}-{start + len(chunk)}: {e}")
        return {"created": created, "updated": updated, "errors": errors}

    @staticmethod
    def search(filters):
        """
        Filter stocks.

        Supported keys: symbol (prefix), company_name (substring), sector,
        industry, basic_industry, macro_economic_classification (exact),
        min_market_cap, max_market_cap, limit, offset.

        Returns:
            tuple: (page of StockModel, total matches)
        """
        query = StockModel.query
        if filters.get("symbol"):
            query = query.filter(StockModel.symbol.like(f"{filters['symbol'].upper()}%"))
        if filters.get("company_name"):
            query = query.filter(StockModel.company_name.ilike(f"%{filters['company_name']}%"))
        for field in ("sector", "industry", "basic_industry", "macro_economic_classification"):
            if filters.get(field):
                query = query.filter(getattr(StockModel, field) == filters[field])
        if filters.get("min_market_cap") is not None:
            query = query.filter(StockModel.market_cap >= filters["min_market_cap"])
        if filters.get("max_market_cap") is not None:
            query = query.filter(StockModel.market_cap <= filters["max_market_cap"])

        total = query.count()
        query = query.order_by(StockModel.market_cap.desc(), StockModel.symbol.asc())
        query = query.offset(filters.get("offset", 0)).limit(filters.get("limit", StoreConfig.search_limit))
        return query.all(), total

    @staticmethod
    def get_distinct(field):
        column = getattr(StockModel, field)
        rows = db.session.query(column).filter(column.isnot(None), column != "").distinct().order_by(column).all()
        return [row[0] for row in rows]

    @staticmethod
    def get_market_cap_stats():
        row = db.session.query(
            func.min(StockModel.market_cap),
            func.max(StockModel.market_cap),
            func.avg(StockModel.market_cap),
            func.count(StockModel.id),
        ).one()
        return {
            "min": row[0] or 0,
            "max": row[1] or 0,
            "avg": float(row[2] or 0),
            "count": row[3] or 0,
        }

    @staticmethod
    def count():
        return StockModel.query.count()

    @staticmethod
    def get_with_market_cap():
        return StockModel.query.filter(StockModel.market_cap > 0).all()

    @staticmethod
    def get_top_by_market_cap(limit):
        return StockModel.query.filter(StockModel.market_cap > 0).order_by(
            StockModel.market_cap.desc(), StockModel.symbol.asc()
        ).limit(limit).all()
