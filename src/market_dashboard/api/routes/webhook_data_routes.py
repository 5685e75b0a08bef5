from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import csv_download, success
from market_dashboard.schemas import BulkDeleteSchema, WebhookDataSchema, WebhookDataSearchSchema
from market_dashboard.services import WebhookDataService
from market_dashboard.utils import today_ist

blp = Blueprint("webhook_data", __name__, url_prefix="/api/data", description="Stored webhook alert events")
data_service = WebhookDataService()
alerts_schema = WebhookDataSchema(many=True)


def _active_filters(args):
    return {key: value for key, value in args.items() if value is not None}


@blp.route("/search")
class DataSearch(MethodView):
    @blp.doc(tags=["Webhook Data"])
    @blp.arguments(WebhookDataSearchSchema, location="query")
    def get(self, args):
        """Filter alerts by date or range, webhook, stock set, scanner and tag"""
        alerts = data_service.search(_active_filters(args))
        return success(alerts_schema.dump(alerts), total=len(alerts))


@blp.route("/search-options")
class DataSearchOptions(MethodView):
    @blp.doc(tags=["Webhook Data"])
    def get(self):
        """Distinct scanners and tags"""
        return success(data_service.search_options())


@blp.route("/export")
class DataExport(MethodView):
    @blp.doc(tags=["Webhook Data"])
    @blp.arguments(WebhookDataSearchSchema, location="query")
    def get(self, args):
        return csv_download(data_service.export_csv(_active_filters(args)), f"webhook-data-{today_ist()}.csv")


@blp.route("/stats/overview")
class DataStats(MethodView):
    @blp.doc(tags=["Webhook Data"])
    def get(self):
        return success(data_service.overview())


@blp.route("/bulk-delete")
class DataBulkDelete(MethodView):
    @blp.doc(tags=["Webhook Data"])
    @blp.arguments(BulkDeleteSchema)
    def delete(self, body):
        deleted = data_service.bulk_delete(body["ids"])
        return success({"deletedCount": deleted}, message=f"Deleted {deleted} records")


@blp.route("/delete/<string:alert_id>")
class DataDelete(MethodView):
    @blp.doc(tags=["Webhook Data"])
    def delete(self, alert_id):
        data_service.delete(alert_id)
        return success(message="Data deleted successfully")


@blp.route("/<string:alert_id>")
class DataDetail(MethodView):
    @blp.doc(tags=["Webhook Data"])
    def get(self, alert_id):
        return success(WebhookDataSchema().dump(data_service.get(alert_id)))
