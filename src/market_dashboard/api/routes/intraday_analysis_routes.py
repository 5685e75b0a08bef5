from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import success
from market_dashboard.schemas import AverageBodySchema, CleanupBodySchema, DateBodySchema, ReloadReferenceSchema
from market_dashboard.services import IntradayAnalysisService

blp = Blueprint("intraday_analysis", __name__, url_prefix="/api/intraday-analysis",
                description="Sector and industry advance/decline rollups")


def _reference_service():
    return current_app.extensions["reference_data"]


def _analysis_service():
    return IntradayAnalysisService(_reference_service().current)


@blp.route("/run-analysis")
class RunAnalysis(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(DateBodySchema)
    def post(self, body):
        """Compute and store the rollup for a date, replacing any earlier run"""
        analysis = _analysis_service().run_analysis(body["date"])
        return success(analysis, message=f"Intraday analysis saved for {analysis['date']}")


@blp.route("/load")
class LoadAnalysis(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(DateBodySchema)
    def post(self, body):
        """Stored rollup for a date; data is null when none was run"""
        analysis = IntradayAnalysisService.load(body["date"])
        if analysis is None:
            return {"success": True, "data": None, "message": f"No saved analysis found for {body['date']}"}
        return success(analysis)


@blp.route("/preopen-20day-average")
class PreopenAverage(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(AverageBodySchema)
    def post(self, body):
        """Average daily pre-open volume per sector and industry"""
        return success(_analysis_service().preopen_average(body["end_date"]))


@blp.route("/preopen-by-date")
class PreopenByDate(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(DateBodySchema)
    def post(self, body):
        snapshot = IntradayAnalysisService.preopen_by_date(body["date"])
        if snapshot is None:
            return {"success": True, "data": None, "message": f"No preopen data found for {body['date']}"}
        return success(snapshot)


@blp.route("/available-dates")
class AvailableDates(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    def get(self):
        return success(IntradayAnalysisService.available_dates())


@blp.route("/cleanup")
class CleanupAnalysis(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(CleanupBodySchema)
    def delete(self, body):
        """Delete analyses dated before today minus daysToKeep"""
        result = IntradayAnalysisService.cleanup(body["days_to_keep"])
        return success(result, message=f"Deleted {result['deletedCount']} old analyses")


@blp.route("/reference")
class ReferenceSummary(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    def get(self):
        """Summary of the sector and industry membership in use"""
        return success(_reference_service().current.summary())


@blp.route("/reload-reference")
class ReloadReference(MethodView):
    @blp.doc(tags=["Intraday Analysis"])
    @blp.arguments(ReloadReferenceSchema)
    def post(self, body):
        """Rebuild the membership from the JSON files or the stock master"""
        summary = _reference_service().reload(body["source"])
        return success(summary, message=f"Reference data reloaded from {body['source']}")
