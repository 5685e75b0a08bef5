from .preopen_service import PreopenService, resolve_date
from .delivery_volume_service import DeliveryVolumeService
from .reference_data_service import ReferenceDataService, build_reference_data, load_reference_data
from .intraday_analysis_service import IntradayAnalysisService
from .webhook_service import WebhookService, build_webhook_url
from .webhook_data_service import WebhookDataService
from .stock_service import StockService
from .financial_calendar_service import FinancialCalendarService
from .stock_news_service import StockNewsService

__all__ = [
    "PreopenService",
    "resolve_date",
    "DeliveryVolumeService",
    "ReferenceDataService",
    "build_reference_data",
    "load_reference_data",
    "IntradayAnalysisService",
    "WebhookService",
    "build_webhook_url",
    "WebhookDataService",
    "StockService",
    "FinancialCalendarService",
    "StockNewsService",
]
