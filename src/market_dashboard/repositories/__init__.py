from .snapshot_repository import PreopenRepository, DeliveryVolumeRepository
from .intraday_analysis_repository import IntradayAnalysisRepository
from .stock_repository import StockRepository
from .webhook_repository import WebhookRepository
from .webhook_data_repository import WebhookDataRepository
from .financial_calendar_repository import FinancialCalendarRepository
from .stock_news_repository import StockNewsRepository

__all__ = [
    "PreopenRepository",
    "DeliveryVolumeRepository",
    "IntradayAnalysisRepository",
    "StockRepository",
    "WebhookRepository",
    "WebhookDataRepository",
    "FinancialCalendarRepository",
    "StockNewsRepository",
]
