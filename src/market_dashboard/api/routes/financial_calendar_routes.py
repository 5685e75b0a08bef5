from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import success
from market_dashboard.schemas import CalendarEntrySchema, CalendarSearchSchema, CalendarUploadSchema
from market_dashboard.services import FinancialCalendarService

blp = Blueprint("financial_calendar", __name__, url_prefix="/api/financial-calendar",
                description="Corporate event calendar")
calendar_service = FinancialCalendarService()
entries_schema = CalendarEntrySchema(many=True)


@blp.route("/purposes")
class CalendarPurposes(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    def get(self):
        return success(calendar_service.purposes())


@blp.route("/upload")
class CalendarUpload(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    @blp.arguments(CalendarUploadSchema)
    def post(self, body):
        """
        Store calendar rows. Purposes joined with "/" become separate entries;
        rows already stored are skipped with a warning.
        """
        result = calendar_service.upload(body["data"])
        return {"success": True, **result}


@blp.route("/search")
class CalendarSearch(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    @blp.arguments(CalendarSearchSchema)
    def post(self, filters):
        entries = calendar_service.search(filters)
        return success(entries_schema.dump(entries), total=len(entries))


@blp.route("/stats")
class CalendarStats(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    def get(self):
        return success(calendar_service.stats())


@blp.route("/list")
class CalendarList(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    def get(self):
        """First 100 entries by event date"""
        entries = calendar_service.list()
        return success(entries_schema.dump(entries), total=len(entries))


@blp.route("/delete/<string:entry_id>")
class CalendarDelete(MethodView):
    @blp.doc(tags=["Financial Calendar"])
    def delete(self, entry_id):
        calendar_service.delete(entry_id)
        return success(message="Financial calendar entry deleted successfully")
