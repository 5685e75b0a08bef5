from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import setup_logger
from market_dashboard.db import db
from market_dashboard.models import PreopenSnapshotModel, DeliveryVolumeSnapshotModel

logger = setup_logger(name="SnapshotRepository")


class SnapshotRepository:
    """
    Date-keyed snapshot storage shared by pre-open and delivery data.
    Subclasses bind the model.
    """
    model = None

    @classmethod
    def insert(cls, snapshot_data):
        """Insert one snapshot document"""
        snapshot = cls.model(**snapshot_data)
        try:
            db.session.add(snapshot)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error inserting {cls.model.__tablename__} for {snapshot_data.get('date')}: {e}")
            return None
        return snapshot

    @classmethod
    def get_by_date(cls, date):
        """All documents stored for a date, in insertion order"""
        return cls.model.query.filter(cls.model.date == date).order_by(cls.model.created_at.asc()).all()

    @classmethod
    def get_between(cls, start_date, end_date, limit=None):
        query = cls.model.query.filter(
            cls.model.date >= start_date,
            cls.model.date <= end_date,
        ).order_by(cls.model.date.desc(), cls.model.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    @classmethod
    def get_all_ordered(cls):
        """Every document, newest date first and newest write first within a date"""
        return cls.model.query.order_by(cls.model.date.desc(), cls.model.created_at.desc()).all()

    @classmethod
    def delete_by_date(cls, date):
        try:
            num_deleted = cls.model.query.filter(cls.model.date == date).delete()
            db.session.commit()
            return num_deleted
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error deleting {cls.model.__tablename__} for {date}: {e}")
            return -1


class PreopenRepository(SnapshotRepository):
    model = PreopenSnapshotModel


class DeliveryVolumeRepository(SnapshotRepository):
    model = DeliveryVolumeSnapshotModel
