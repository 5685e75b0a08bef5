from .stock_model import StockModel
from .snapshot_model import PreopenSnapshotModel, DeliveryVolumeSnapshotModel
from .intraday_analysis_model import IntradayAnalysisModel
from .webhook_model import WebhookModel, WebhookDataModel
from .financial_calendar_model import FinancialCalendarModel
from .stock_news_model import StockNewsModel

__all__ = [
    "StockModel",
    "PreopenSnapshotModel",
    "DeliveryVolumeSnapshotModel",
    "IntradayAnalysisModel",
    "WebhookModel",
    "WebhookDataModel",
    "FinancialCalendarModel",
    "StockNewsModel",
]
