import pytz

MARKET_TIMEZONE = pytz.timezone("Asia/Kolkata")
DATE_KEY_FORMAT = "%Y-%m-%d"


class GapConfig:
    """
    Pre-open gap bands, in percent change vs previous close.

    strong_threshold: gaps strictly beyond this are Strong
    moderate_threshold: gaps at or beyond this (up to strong) are Moderate;
        anything strictly inside +/- moderate_threshold is not bucketed
    """
    strong_threshold: float = 3.0
    moderate_threshold: float = 1.0
    endpoint_top_n: int = 10
    news_top_n: int = 7


class DeliveryConfig:
    """Delivery percentage thresholds"""
    default_min_percent: float = 30.0
    default_limit: int = 50
    very_high_percent: float = 70.0
    high_percent: float = 50.0


class ImbalanceConfig:
    top_n: int = 10
    strong_percent: float = 50.0


class PreopenConfig:
    spread_threshold: float = 1.0
    top_n: int = 50
    average_window_days: int = 20


class StoreConfig:
    batch_write_limit: int = 500
    default_days_to_keep: int = 30
    search_limit: int = 50
    calendar_list_limit: int = 100


class AIConfig:
    """Retry policy and pacing for the AI provider"""
    max_attempts: int = 3
    backoff_start_seconds: float = 2.0
    backoff_increment_seconds: float = 2.0
    request_timeout_seconds: int = 60
    inter_request_delay_seconds: float = 1.0
    sector_leader_count: int = 3
