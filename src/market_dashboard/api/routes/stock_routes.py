from flask.views import MethodView
from flask_smorest import Blueprint

from market_dashboard.api.responses import csv_download, success
from market_dashboard.errors import NotFoundError
from market_dashboard.schemas import (StockImportSchema, StockSchema, StockSearchSchema, StockUpdateSchema,
                                      TopStocksQuerySchema)
from market_dashboard.services import StockService
from market_dashboard.utils import today_ist

blp = Blueprint("stocks", __name__, url_prefix="/api/stocks", description="Stock master records")
stock_service = StockService()
stock_schema = StockSchema()
stocks_schema = StockSchema(many=True)


def _top_groups(group_field, name):
    groups = stock_service.top_by_group(group_field)
    if name is None:
        return groups
    if name not in groups:
        raise NotFoundError(f"No stocks found for {group_field} {name}")
    return {name: groups[name]}


@blp.route("/create")
class StockCreate(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(StockSchema)
    def post(self, stock_data):
        stock = stock_service.create(stock_data)
        return success(stock_schema.dump(stock), message="Stock created successfully"), 201


@blp.route("/update/<string:stock_id>")
class StockUpdate(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(StockUpdateSchema(partial=True))
    def put(self, stock_data, stock_id):
        stock = stock_service.update(stock_id, stock_data)
        return success(stock_schema.dump(stock), message="Stock updated successfully")


@blp.route("/delete/<string:stock_id>")
class StockDelete(MethodView):
    @blp.doc(tags=["Stocks"])
    def delete(self, stock_id):
        stock_service.delete(stock_id)
        return success(message="Stock deleted successfully")


@blp.route("/search")
class StockSearch(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(StockSearchSchema)
    def post(self, filters):
        """Filter by taxonomy, name and market cap range; largest first"""
        active = {key: value for key, value in filters.items() if value is not None}
        result = stock_service.search(active)
        return success(stocks_schema.dump(result["stocks"]), pagination=result["pagination"])


@blp.route("/filter-options")
class StockFilterOptions(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self):
        """Distinct taxonomy values and market cap statistics"""
        return success(stock_service.filter_options())


@blp.route("/stats/count")
class StockStats(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self):
        return success(stock_service.stats())


@blp.route("/export/csv")
class StockExport(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self):
        return csv_download(stock_service.export_csv(), f"stocks-{today_ist()}.csv")


@blp.route("/import")
class StockImport(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(StockImportSchema)
    def post(self, body):
        """Upsert rows of the index constituent sheet by symbol"""
        result = stock_service.import_rows(body["data"])
        message = f"Import completed: {result['created']} created, {result['updated']} updated"
        return success(result, message=message)


@blp.route("/top/sector", endpoint="top_sectors", defaults={"name": None})
@blp.route("/top/sector/<string:name>")
class TopBySector(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self, name):
        """Five largest stocks of each sector"""
        return success(_top_groups("sector", name))


@blp.route("/top/industry", endpoint="top_industries", defaults={"name": None})
@blp.route("/top/industry/<string:name>")
class TopByIndustry(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self, name):
        """Five largest stocks of each industry"""
        return success(_top_groups("industry", name))


@blp.route("/top/overall")
class TopOverall(MethodView):
    @blp.doc(tags=["Stocks"])
    @blp.arguments(TopStocksQuerySchema, location="query")
    def get(self, args):
        stocks = stock_service.top_overall(args["limit"])
        return success(stocks, total=len(stocks))


@blp.route("/list")
class StockSymbolList(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self):
        """All symbols, alphabetical"""
        symbols = stock_service.symbols()
        return success(symbols, total=len(symbols))


@blp.route("/<string:stock_id>")
class StockDetail(MethodView):
    @blp.doc(tags=["Stocks"])
    def get(self, stock_id):
        return success(stock_schema.dump(stock_service.get(stock_id)))
