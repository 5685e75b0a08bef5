from sqlalchemy.exc import SQLAlchemyError

from market_dashboard.config import setup_logger
from market_dashboard.db import db
from market_dashboard.models import IntradayAnalysisModel

logger = setup_logger(name="IntradayAnalysisRepository")


class IntradayAnalysisRepository:

    @staticmethod
    def get_by_date(date):
        return IntradayAnalysisModel.query.filter(IntradayAnalysisModel.date == date).first()

    @staticmethod
    def upsert(date, analysis_data):
        """Insert or overwrite the analysis stored for a date"""
        analysis = IntradayAnalysisModel.query.filter(IntradayAnalysisModel.date == date).first()
        try:
            if analysis:
                for field, value in analysis_data.items():
                    setattr(analysis, field, value)
            else:
                analysis = IntradayAnalysisModel(date=date, **analysis_data)
                db.session.add(analysis)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error saving intraday analysis for {date}: {e}")
            return None
        return analysis

    @staticmethod
    def get_available_dates():
        rows = db.session.query(IntradayAnalysisModel.date).order_by(IntradayAnalysisModel.date.desc()).all()
        return [row.date for row in rows]

    @staticmethod
    def delete_before(cutoff_date):
        """Delete analyses dated before cutoff_date (YYYY-MM-DD)"""
        try:
            num_deleted = IntradayAnalysisModel.query.filter(IntradayAnalysisModel.date < cutoff_date).delete()
            db.session.commit()
            return num_deleted
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Error cleaning intraday analysis before {cutoff_date}: {e}")
            return -1
