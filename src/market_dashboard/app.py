from flask import Flask, jsonify
from flask_migrate import Migrate
from flask_smorest import Api

from market_dashboard.adaptors import GrokAdaptor
from market_dashboard.api.routes import (
    preopen_bp,
    delivery_volume_bp,
    intraday_analysis_bp,
    webhook_bp,
    webhook_data_bp,
    stock_bp,
    financial_calendar_bp,
    stock_news_bp,
)
from market_dashboard.config import Config, setup_logger
from market_dashboard.db import db
from market_dashboard.errors import DashboardError, UpstreamError
from market_dashboard.services import ReferenceDataService
from market_dashboard.utils import utc_now

logger = setup_logger(name="MarketDashboard")

FEATURES = [
    "preopen",
    "delivery-volume",
    "intraday-analysis",
    "webhooks",
    "webhook-data",
    "stocks",
    "financial-calendar",
    "stock-news",
]


class DashboardApi(Api):
    """Renders HTTP errors, including request validation, as the JSON error envelope"""

    def handle_http_exception(self, error):
        code = error.code or 500
        data = getattr(error, "data", None) or {}
        body = {"success": False, "error": data.get("message") or error.description or error.name}
        if code == 422:
            code = 400
            body["error"] = "Invalid request"
            body["details"] = data.get("messages") or data.get("errors")
        return jsonify(body), code


def register_error_handlers(app):
    @app.errorhandler(DashboardError)
    def handle_dashboard_error(error):
        if isinstance(error, UpstreamError):
            logger.error(f"{error.message}: {error.cause}" if error.cause else error.message)
            body = error.to_dict(expose_cause=app.config.get("APP_ENV") != "production")
        else:
            body = error.to_dict()
        return jsonify(body), error.status_code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        logger.error(f"Unhandled error: {error}", exc_info=True)
        body = {"success": False, "error": "Internal server error"}
        if app.config.get("APP_ENV") != "production":
            body["message"] = str(error)
        return jsonify(body), 500


def create_app(config_class=Config):
    """Application factory"""
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    Migrate(app, db)
    api = DashboardApi(app)
    register_error_handlers(app)

    # Create all database tables
    with app.app_context():
        db.create_all()

    app.extensions["reference_data"] = ReferenceDataService(
        app.config["SECTOR_REFERENCE_PATH"],
        app.config["INDUSTRY_REFERENCE_PATH"],
    )
    app.extensions["grok_adaptor"] = GrokAdaptor(
        {
            "api_key": app.config.get("GROK_API_KEY"),
            "api_url": app.config["GROK_API_URL"],
            "model": app.config["GROK_MODEL"],
        },
        logger=setup_logger(name="GrokAdaptor"),
    )

    # Register API blueprints
    api.register_blueprint(preopen_bp)
    api.register_blueprint(delivery_volume_bp)
    api.register_blueprint(intraday_analysis_bp)
    api.register_blueprint(webhook_bp)
    api.register_blueprint(webhook_data_bp)
    api.register_blueprint(stock_bp)
    api.register_blueprint(financial_calendar_bp)
    api.register_blueprint(stock_news_bp)

    @app.route("/health")
    def health():
        return jsonify({
            "status": "OK",
            "timestamp": utc_now().isoformat() + "Z",
            "environment": app.config.get("APP_ENV"),
            "features": FEATURES,
            "aiConfigured": app.extensions["grok_adaptor"].is_configured,
        })

    @app.route("/")
    def index():
        return jsonify({
            "name": app.config["API_TITLE"],
            "version": app.config["API_VERSION"],
            "docs": "/swagger-ui",
            "endpoints": {
                "preopen": "/api/preopen",
                "deliveryVolume": "/api/delivery-volume",
                "intradayAnalysis": "/api/intraday-analysis",
                "webhooks": "/api/webhooks",
                "webhookData": "/api/data",
                "stocks": "/api/stocks",
                "financialCalendar": "/api/financial-calendar",
                "stockNews": "/api/stock-news",
            },
        })

    logger.info(f"Market dashboard app created ({app.config.get('APP_ENV')})")
    return app
