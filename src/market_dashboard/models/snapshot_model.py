"""
Snapshot Models

Date-keyed market snapshots. Ingestion is append-only, so several rows may
share a date; readers pick the latest by created_at.
"""
import uuid

from sqlalchemy import Index

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class PreopenSnapshotModel(db.Model):
    """Pre-open auction snapshot with the raw per-security array"""
    __tablename__ = 'preopen_data'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = db.Column(db.String(10), nullable=False)
    timestamp = db.Column(db.String(40), nullable=False)
    source = db.Column(db.String(100), nullable=False, default='unknown')
    data_format = db.Column(db.String(30), nullable=False, default='enhanced')
    total_stocks = db.Column(db.Integer, nullable=False, default=0)
    original_count = db.Column(db.Integer, nullable=True)
    advances = db.Column(db.Integer, nullable=False, default=0)
    declines = db.Column(db.Integer, nullable=False, default=0)
    unchanged = db.Column(db.Integer, nullable=False, default=0)
    summary = db.Column(db.JSON, nullable=True)
    securities = db.Column(db.JSON, nullable=False, default=list)
    received_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_preopen_date", "date"),
    )

    def __repr__(self):
        return f"<PreopenSnapshot {self.date} {self.id}>"


class DeliveryVolumeSnapshotModel(db.Model):
    """Security-wise delivery position snapshot"""
    __tablename__ = 'delivery_volume_data'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = db.Column(db.String(10), nullable=False)
    timestamp = db.Column(db.String(40), nullable=False)
    source = db.Column(db.String(100), nullable=False, default='nse-scraper')
    data_format = db.Column(db.String(30), nullable=False, default='securityWiseDP')
    total_securities = db.Column(db.Integer, nullable=False, default=0)
    summary = db.Column(db.JSON, nullable=False, default=dict)
    securities = db.Column(db.JSON, nullable=False, default=list)
    received_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)

    __table_args__ = (
        Index("idx_delivery_volume_date", "date"),
    )

    def __repr__(self):
        return f"<DeliveryVolumeSnapshot {self.date} {self.id}>"
