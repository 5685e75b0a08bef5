from marshmallow import Schema, fields, validate

from market_dashboard.config import StoreConfig


class StockSchema(Schema):
    id = fields.String(dump_only=True)
    symbol = fields.String(required=True, validate=validate.Length(min=1))
    company_name = fields.String(required=True, data_key="companyName", validate=validate.Length(min=1))
    macro_economic_classification = fields.String(data_key="macroEconomicClassification", allow_none=True)
    sector = fields.String(allow_none=True)
    industry = fields.String(allow_none=True)
    basic_industry = fields.String(data_key="basicIndustry", allow_none=True)
    market_cap = fields.Float(data_key="marketCap", allow_none=True)
    free_float_market_cap = fields.Float(data_key="freeFloatMarketCap", allow_none=True)
    last_price = fields.Float(data_key="lastPrice", allow_none=True)
    p_change = fields.Float(data_key="pChange", allow_none=True)
    volume = fields.Float(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt", dump_only=True)
    updated_at = fields.DateTime(data_key="updatedAt", dump_only=True)


class StockUpdateSchema(StockSchema):
    """Partial update; every field optional"""
    symbol = fields.String(validate=validate.Length(min=1))
    company_name = fields.String(data_key="companyName", validate=validate.Length(min=1))


class StockSearchSchema(Schema):
    symbol = fields.String(load_default=None, allow_none=True)
    company_name = fields.String(data_key="companyName", load_default=None, allow_none=True)
    sector = fields.String(load_default=None, allow_none=True)
    industry = fields.String(load_default=None, allow_none=True)
    basic_industry = fields.String(data_key="basicIndustry", load_default=None, allow_none=True)
    macro_economic_classification = fields.String(
        data_key="macroEconomicClassification", load_default=None, allow_none=True
    )
    min_market_cap = fields.Float(data_key="minMarketCap", load_default=None, allow_none=True)
    max_market_cap = fields.Float(data_key="maxMarketCap", load_default=None, allow_none=True)
    limit = fields.Integer(load_default=StoreConfig.search_limit, validate=validate.Range(min=1, max=1000))
    offset = fields.Integer(load_default=0, validate=validate.Range(min=0))


class TopStocksQuerySchema(Schema):
    limit = fields.Integer(load_default=10, validate=validate.Range(min=1, max=500))


class StockImportSchema(Schema):
    data = fields.Raw(required=True, metadata={"description": "Rows keyed by the constituent sheet's column headers"})
