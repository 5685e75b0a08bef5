"""
Snapshot Schemas

Request arguments for the pre-open, delivery volume and intraday analysis
endpoints. Ingestion bodies keep unknown keys so scraper extensions pass
through untouched.
"""
from marshmallow import INCLUDE, Schema, fields, validate

from market_dashboard.config import DeliveryConfig, GapConfig, PreopenConfig, StoreConfig


class SnapshotIngestSchema(Schema):
    class Meta:
        unknown = INCLUDE

    date = fields.String(load_default=None, allow_none=True)
    source = fields.String(load_default=None, allow_none=True)
    timestamp = fields.String(load_default=None, allow_none=True)
    data = fields.Raw(required=True, metadata={"description": "Array of security records"})


class SpreadQuerySchema(Schema):
    threshold = fields.Float(load_default=PreopenConfig.spread_threshold, validate=validate.Range(min=0))


class GapQuerySchema(Schema):
    limit = fields.Integer(load_default=GapConfig.endpoint_top_n, validate=validate.Range(min=1))


class IndustryQuerySchema(Schema):
    level = fields.String(load_default="sector", validate=validate.OneOf(["sector", "industry", "basicIndustry"]))
    parent = fields.String(load_default=None, allow_none=True)


class TopDeliveryQuerySchema(Schema):
    min_percent = fields.Float(
        load_default=DeliveryConfig.default_min_percent,
        validate=validate.Range(min=0, max=100),
        data_key="minPercent",
    )
    limit = fields.Integer(load_default=DeliveryConfig.default_limit, validate=validate.Range(min=1))


class DateBodySchema(Schema):
    date = fields.String(required=True, metadata={"description": "YYYY-MM-DD"})


class AverageBodySchema(Schema):
    end_date = fields.String(required=True, data_key="endDate")


class CleanupBodySchema(Schema):
    days_to_keep = fields.Integer(
        load_default=StoreConfig.default_days_to_keep,
        validate=validate.Range(min=0),
        data_key="daysToKeep",
    )


class ReloadReferenceSchema(Schema):
    source = fields.String(load_default="files", validate=validate.OneOf(["files", "stock-master"]))
