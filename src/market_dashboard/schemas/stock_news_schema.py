from marshmallow import Schema, fields, validate

from market_dashboard.config import StoreConfig
from market_dashboard.utils import NEWS_TYPES, SENTIMENTS


class StockNewsSchema(Schema):
    id = fields.String(dump_only=True)
    type = fields.String()
    symbol = fields.String(allow_none=True)
    company_name = fields.String(data_key="companyName", allow_none=True)
    sector = fields.String(allow_none=True)
    date = fields.String()
    gap_percent = fields.Float(data_key="gapPercent", allow_none=True)
    gap_type = fields.String(data_key="gapType", allow_none=True)
    headline = fields.String(allow_none=True)
    reason = fields.String(allow_none=True)
    details = fields.String(allow_none=True)
    news_category = fields.String(data_key="newsCategory", allow_none=True)
    sentiment = fields.String(allow_none=True)
    confidence = fields.String(allow_none=True)
    price_action = fields.String(data_key="priceAction", allow_none=True)
    source = fields.String()
    status = fields.String()
    timestamp = fields.String(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", dump_only=True)


class FetchStockNewsSchema(Schema):
    symbol = fields.String(load_default=None, allow_none=True)
    gap_percent = fields.Float(data_key="gapPercent", load_default=None, allow_none=True)
    gap_type = fields.String(data_key="gapType", load_default=None, allow_none=True)
    date = fields.String(load_default=None, allow_none=True)
    company_name = fields.String(data_key="companyName", load_default=None, allow_none=True)
    sector = fields.String(load_default=None, allow_none=True)


class GapStockSchema(Schema):
    symbol = fields.String(required=True)
    gap = fields.Float(required=True)
    gap_type = fields.String(data_key="gapType", load_default=None, allow_none=True)
    company_name = fields.String(data_key="companyName", load_default=None, allow_none=True)
    sector = fields.String(load_default=None, allow_none=True)


class GapNewsBatchSchema(Schema):
    stocks = fields.List(fields.Nested(GapStockSchema), load_default=None, allow_none=True)
    date = fields.String(load_default=None, allow_none=True)


class NewsSearchSchema(Schema):
    type = fields.String(load_default=None, allow_none=True, validate=validate.OneOf(NEWS_TYPES))
    symbol = fields.String(load_default=None, allow_none=True)
    sector = fields.String(load_default=None, allow_none=True)
    sentiment = fields.String(load_default=None, allow_none=True, validate=validate.OneOf(SENTIMENTS))
    date = fields.String(load_default=None, allow_none=True)
    start_date = fields.String(data_key="startDate", load_default=None, allow_none=True)
    end_date = fields.String(data_key="endDate", load_default=None, allow_none=True)
    limit = fields.Integer(load_default=StoreConfig.search_limit, validate=validate.Range(min=1, max=500))


class MorningAnalysisSchema(Schema):
    date = fields.String(load_default=None, allow_none=True)
