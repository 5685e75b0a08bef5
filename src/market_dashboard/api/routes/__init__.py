from .preopen_routes import blp as preopen_bp
from .delivery_volume_routes import blp as delivery_volume_bp
from .intraday_analysis_routes import blp as intraday_analysis_bp
from .webhook_routes import blp as webhook_bp
from .webhook_data_routes import blp as webhook_data_bp
from .stock_routes import blp as stock_bp
from .financial_calendar_routes import blp as financial_calendar_bp
from .stock_news_routes import blp as stock_news_bp

__all__ = [
    "preopen_bp",
    "delivery_volume_bp",
    "intraday_analysis_bp",
    "webhook_bp",
    "webhook_data_bp",
    "stock_bp",
    "financial_calendar_bp",
    "stock_news_bp",
]
