from flask import request
from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import success
from market_dashboard.schemas import GapQuerySchema, IndustryQuerySchema, SnapshotIngestSchema, SpreadQuerySchema
from market_dashboard.services import PreopenService

blp = Blueprint("preopen", __name__, url_prefix="/api/preopen", description="Pre-open auction snapshots")
preopen_service = PreopenService()


@blp.route("/receive")
class PreopenReceive(MethodView):
    @blp.doc(tags=["Pre-open"])
    @blp.arguments(SnapshotIngestSchema)
    def post(self, payload):
        """Store a pre-open snapshot posted by the scraper"""
        result = preopen_service.receive(payload)
        return success(result, message="Preopen data stored successfully"), 201


@blp.route("/store")
class PreopenLegacyStore(MethodView):
    @blp.doc(tags=["Pre-open"])
    def post(self):
        """Store a bare array of securities for today (older scrapers)"""
        result = preopen_service.store_legacy(request.get_json(silent=True))
        return success(result, message="Preopen data stored successfully"), 201


@blp.route("/data", endpoint="data_today", defaults={"date": None})
@blp.route("/data/<string:date>")
class PreopenData(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self, date):
        """Latest snapshot for a date (default today) with recomputed breadth"""
        return success(preopen_service.get_data(date))

    @blp.doc(tags=["Pre-open"])
    def delete(self, date):
        """Delete every snapshot stored for the date"""
        result = preopen_service.delete(date)
        return success(result, message=f"Deleted preopen data for {result['date']}")


@blp.route("/search/<string:date>/<string:symbol>")
class PreopenSearch(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self, date, symbol):
        """Case-insensitive symbol substring search"""
        return success(preopen_service.search(date, symbol))


@blp.route("/dates")
class PreopenDates(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self):
        """Dates with stored snapshots, newest first"""
        return success(preopen_service.dates())


@blp.route("/stats", endpoint="stats_today", defaults={"date": None})
@blp.route("/stats/<string:date>")
class PreopenStats(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self, date):
        """Stored summary of the latest snapshot; hasData is false when absent"""
        return success(preopen_service.stats(date))


@blp.route("/analysis/gaps", endpoint="gaps_today", defaults={"date": None})
@blp.route("/analysis/gaps/<string:date>")
class PreopenGaps(MethodView):
    @blp.doc(tags=["Pre-open"])
    @blp.arguments(GapQuerySchema, location="query")
    def get(self, args, date):
        """Gap up / gap down buckets"""
        return success(preopen_service.gaps(date, limit=args["limit"]))


@blp.route("/analysis/volume-imbalance", endpoint="volume_imbalance_today", defaults={"date": None})
@blp.route("/analysis/volume-imbalance/<string:date>")
class PreopenVolumeImbalance(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self, date):
        """Strongest bid-side and ask-side order book imbalances"""
        return success(preopen_service.volume_imbalance(date))


@blp.route("/analysis/spreads", endpoint="spreads_today", defaults={"date": None})
@blp.route("/analysis/spreads/<string:date>")
class PreopenSpreads(MethodView):
    @blp.doc(tags=["Pre-open"])
    @blp.arguments(SpreadQuerySchema, location="query")
    def get(self, args, date):
        """Tightest bid/ask spreads at or under the threshold"""
        return success(preopen_service.spreads(date, threshold=args["threshold"]))


@blp.route("/analysis/volume", endpoint="volume_today", defaults={"date": None})
@blp.route("/analysis/volume/<string:date>")
class PreopenVolume(MethodView):
    @blp.doc(tags=["Pre-open"])
    def get(self, date):
        """Highest pre-open quantities"""
        return success(preopen_service.volume(date))


@blp.route("/analysis/industry", endpoint="industry_today", defaults={"date": None})
@blp.route("/analysis/industry/<string:date>")
class PreopenIndustry(MethodView):
    @blp.doc(tags=["Pre-open"])
    @blp.arguments(IndustryQuerySchema, location="query")
    def get(self, args, date):
        """Snapshot grouped by sector, industry or basic industry"""
        return success(preopen_service.industry(date, level=args["level"], parent=args["parent"]))
