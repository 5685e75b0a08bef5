from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import success
from market_dashboard.schemas import SnapshotIngestSchema, TopDeliveryQuerySchema
from market_dashboard.services import DeliveryVolumeService

blp = Blueprint("delivery_volume", __name__, url_prefix="/api/delivery-volume",
                description="Security-wise delivery volume snapshots")
delivery_service = DeliveryVolumeService()


@blp.route("/receive")
class DeliveryReceive(MethodView):
    @blp.doc(tags=["Delivery Volume"])
    @blp.arguments(SnapshotIngestSchema)
    def post(self, payload):
        """Store a delivery volume snapshot"""
        result = delivery_service.receive(payload)
        return success(result, message="Delivery volume data stored successfully"), 201


@blp.route("/data", endpoint="data_today", defaults={"date": None})
@blp.route("/data/<string:date>")
class DeliveryData(MethodView):
    @blp.doc(tags=["Delivery Volume"])
    def get(self, date):
        """Latest delivery snapshot for a date (default today)"""
        return success(delivery_service.get_data(date))

    @blp.doc(tags=["Delivery Volume"])
    def delete(self, date):
        result = delivery_service.delete(date)
        return success(result, message=f"Deleted delivery volume data for {result['date']}")


@blp.route("/search/<string:date>/<string:symbol>")
class DeliverySearch(MethodView):
    @blp.doc(tags=["Delivery Volume"])
    def get(self, date, symbol):
        """Exact symbol lookup"""
        return success(delivery_service.search(date, symbol))


@blp.route("/dates")
class DeliveryDates(MethodView):
    @blp.doc(tags=["Delivery Volume"])
    def get(self):
        return success(delivery_service.dates())


@blp.route("/analysis/top-delivery", endpoint="top_delivery_today", defaults={"date": None})
@blp.route("/analysis/top-delivery/<string:date>")
class TopDelivery(MethodView):
    @blp.doc(tags=["Delivery Volume"])
    @blp.arguments(TopDeliveryQuerySchema, location="query")
    def get(self, args, date):
        """Securities at or above minPercent delivery, highest first, with tier counts"""
        return success(delivery_service.top_delivery(date, min_percent=args["min_percent"], limit=args["limit"]))
