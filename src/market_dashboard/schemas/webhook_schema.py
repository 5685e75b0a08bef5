from marshmallow import Schema, fields, validate

from market_dashboard.config import StoreConfig

STOCK_SET_CHOICES = ["NIFTY_500", "ANY_WEBHOOK"]


class WebhookSchema(Schema):
    id = fields.String(dump_only=True)
    name = fields.String(required=True, validate=validate.Length(min=1))
    stock_set = fields.String(required=True, data_key="stockSet", validate=validate.OneOf(STOCK_SET_CHOICES))
    tags = fields.List(fields.String(), load_default=list)
    description = fields.String(load_default="", allow_none=True)
    possible_output = fields.String(data_key="possibleOutput", load_default="", allow_none=True)
    webhook_url = fields.String(data_key="webhookUrl", dump_only=True)
    created_at = fields.DateTime(data_key="createdAt", dump_only=True)
    updated_at = fields.DateTime(data_key="updatedAt", dump_only=True)


class WebhookUpdateSchema(Schema):
    name = fields.String(validate=validate.Length(min=1))
    stock_set = fields.String(data_key="stockSet", validate=validate.OneOf(STOCK_SET_CHOICES))
    tags = fields.List(fields.String())
    description = fields.String(allow_none=True)
    possible_output = fields.String(data_key="possibleOutput", allow_none=True)


class PossibleOutputSchema(Schema):
    possible_output = fields.String(data_key="possibleOutput", load_default="", allow_none=True)


class WebhookDataSchema(Schema):
    """Stored alert event"""
    id = fields.String(dump_only=True)
    webhook_id = fields.String(data_key="webhookId")
    webhook_name = fields.String(data_key="webhookName")
    webhook_description = fields.String(data_key="webhookDescription")
    stocks = fields.List(fields.String())
    trigger_prices = fields.List(fields.Float(allow_none=True), data_key="triggerPrices")
    triggered_at = fields.String(data_key="triggeredAt")
    scan_name = fields.String(data_key="scanName")
    scan_url = fields.String(data_key="scanUrl")
    alert_name = fields.String(data_key="alertName")
    date = fields.String()
    tags = fields.List(fields.String())
    stock_set = fields.String(data_key="stockSet")
    received_at = fields.DateTime(data_key="receivedAt")


class WebhookDataSearchSchema(Schema):
    date = fields.String(load_default=None, allow_none=True)
    start_date = fields.String(data_key="startDate", load_default=None, allow_none=True)
    end_date = fields.String(data_key="endDate", load_default=None, allow_none=True)
    webhook = fields.String(load_default=None, allow_none=True, metadata={"description": "Webhook name"})
    stock_set = fields.String(data_key="stockSet", load_default=None, allow_none=True)
    scanner = fields.String(load_default=None, allow_none=True)
    tag = fields.String(load_default=None, allow_none=True)
    limit = fields.Integer(load_default=StoreConfig.search_limit, validate=validate.Range(min=1))


class BulkDeleteSchema(Schema):
    ids = fields.Raw(required=True, metadata={"description": "Array of record ids"})
