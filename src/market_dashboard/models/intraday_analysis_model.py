import uuid

from market_dashboard.db import db
from market_dashboard.utils import utc_now


class IntradayAnalysisModel(db.Model):
    """Sector/industry breadth computed for one date; re-runs overwrite the row"""
    __tablename__ = 'intraday_analysis'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    date = db.Column(db.String(10), nullable=False, unique=True)
    timestamp = db.Column(db.String(40), nullable=False)
    sector_analysis = db.Column(db.JSON, nullable=False, default=list)
    industry_analysis = db.Column(db.JSON, nullable=False, default=list)
    summary = db.Column(db.JSON, nullable=False, default=dict)
    preopen_snapshot_id = db.Column(db.String(36), nullable=True)
    reference_source = db.Column(db.String(30), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utc_now)
    updated_at = db.Column(db.DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<IntradayAnalysis {self.date}>"

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date,
            "timestamp": self.timestamp,
            "sectorAnalysis": self.sector_analysis,
            "industryAnalysis": self.industry_analysis,
            "summary": self.summary,
            "preopenSnapshotId": self.preopen_snapshot_id,
            "referenceSource": self.reference_source,
            "savedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
