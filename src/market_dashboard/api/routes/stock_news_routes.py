from flask import current_app
from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import event_stream, success
from market_dashboard.schemas import (CleanupBodySchema, FetchStockNewsSchema, GapNewsBatchSchema,
                                      MorningAnalysisSchema, NewsSearchSchema, StockNewsSchema)
from market_dashboard.services import StockNewsService, resolve_date
from market_dashboard.utils import ProgressChannel

blp = Blueprint("stock_news", __name__, url_prefix="/api/stock-news", description="AI-analyzed stock news")
news_list_schema = StockNewsSchema(many=True)


def _start_stream(producer, *args):
    """Run producer(channel, *args) in the background and stream its events"""
    app = current_app._get_current_object()
    channel = ProgressChannel().start(lambda ch: producer(ch, *args), app=app)
    return event_stream(channel)


@blp.route("/fetch-stock-news")
class FetchStockNews(MethodView):
    @blp.doc(tags=["Stock News"])
    @blp.arguments(FetchStockNewsSchema)
    def post(self, body):
        """Gap analysis for one stock, served from cache when already fetched"""
        result = StockNewsService().fetch_stock_news(body)
        return success(result["data"], cached=result["cached"])


@blp.route("/fetch-gap-news-batch")
class FetchGapNewsBatch(MethodView):
    @blp.doc(tags=["Stock News"])
    @blp.arguments(GapNewsBatchSchema)
    def post(self, body):
        """Server-Sent Events with per-stock progress of a batch gap news fetch"""
        service = StockNewsService()
        service.validate_batch(body["stocks"])
        date = resolve_date(body["date"])
        return _start_stream(service.gap_news_batch, body["stocks"], date)


@blp.route("/morning-news-analysis")
class MorningNewsAnalysis(MethodView):
    @blp.doc(tags=["Stock News"])
    @blp.arguments(MorningAnalysisSchema)
    def post(self, body):
        """
        Server-Sent Events: market summary, gap stock news and sector leader
        news for the day's latest pre-open snapshot.
        """
        service = StockNewsService()
        service.require_ai()
        date = resolve_date(body["date"])
        return _start_stream(service.morning_news_analysis, date)


@blp.route("/search-news")
class SearchNews(MethodView):
    @blp.doc(tags=["Stock News"])
    @blp.arguments(NewsSearchSchema)
    def post(self, filters):
        active = {key: value for key, value in filters.items() if value is not None}
        news = StockNewsService.search(active)
        return success(news_list_schema.dump(news), count=len(news))


@blp.route("/gap-news/<string:symbol>/<string:date>")
class GapNews(MethodView):
    @blp.doc(tags=["Stock News"])
    def get(self, symbol, date):
        return success(StockNewsSchema().dump(StockNewsService.gap_news(symbol, date)))


@blp.route("/gap-news-date/<string:date>")
class GapNewsByDate(MethodView):
    @blp.doc(tags=["Stock News"])
    def get(self, date):
        news = StockNewsService.gap_news_by_date(date)
        return success(news_list_schema.dump(news), count=len(news))


@blp.route("/cleanup")
class NewsCleanup(MethodView):
    @blp.doc(tags=["Stock News"])
    @blp.arguments(CleanupBodySchema)
    def delete(self, body):
        """Hard delete news created more than daysToKeep days ago"""
        result = StockNewsService.cleanup(body["days_to_keep"])
        return success(result, message=f"Deleted {result['deletedCount']} old news items")


@blp.route("/test-ai")
class TestAI(MethodView):
    @blp.doc(tags=["Stock News"])
    def get(self):
        """Round trip to the AI provider"""
        return success(StockNewsService().test_ai(), message="AI provider connection successful")
