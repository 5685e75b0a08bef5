from .snapshot_schema import (SnapshotIngestSchema, SpreadQuerySchema, GapQuerySchema, IndustryQuerySchema,
                              TopDeliveryQuerySchema, DateBodySchema, AverageBodySchema, CleanupBodySchema,
                              ReloadReferenceSchema)
from .webhook_schema import (WebhookSchema, WebhookUpdateSchema, PossibleOutputSchema, WebhookDataSchema,
                             WebhookDataSearchSchema, BulkDeleteSchema)
from .stock_schema import StockSchema, StockUpdateSchema, StockSearchSchema, TopStocksQuerySchema, StockImportSchema
from .financial_calendar_schema import CalendarEntrySchema, CalendarUploadSchema, CalendarSearchSchema
from .stock_news_schema import (StockNewsSchema, FetchStockNewsSchema, GapStockSchema, GapNewsBatchSchema,
                                NewsSearchSchema, MorningAnalysisSchema)

__all__ = [
    "SnapshotIngestSchema",
    "SpreadQuerySchema",
    "GapQuerySchema",
    "IndustryQuerySchema",
    "TopDeliveryQuerySchema",
    "DateBodySchema",
    "AverageBodySchema",
    "CleanupBodySchema",
    "ReloadReferenceSchema",
    "WebhookSchema",
    "WebhookUpdateSchema",
    "PossibleOutputSchema",
    "WebhookDataSchema",
    "WebhookDataSearchSchema",
    "BulkDeleteSchema",
    "StockSchema",
    "StockUpdateSchema",
    "StockSearchSchema",
    "TopStocksQuerySchema",
    "StockImportSchema",
    "CalendarEntrySchema",
    "CalendarUploadSchema",
    "CalendarSearchSchema",
    "StockNewsSchema",
    "FetchStockNewsSchema",
    "GapStockSchema",
    "GapNewsBatchSchema",
    "NewsSearchSchema",
    "MorningAnalysisSchema",
]
