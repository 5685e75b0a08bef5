from .numeric_utils import parse_numeric, round2, format_percentage, safe_ratio
from .date_utils import (now_ist, today_ist, utc_now, is_date_key, parse_date_key, shift_date_key,
                         cutoff_datetime, is_calendar_date, parse_calendar_date)
from .snapshot_utils import (drop_invalid_records, normalize_preopen_security, select_latest, compute_breadth,
                             search_by_symbol, low_spread_stocks, high_volume_stocks)
from .gap_utils import GAP_BUCKETS, gap_bucket, classify_gaps
from .delivery_utils import (delivery_percentage, normalize_delivery_security, summarize_delivery,
                             market_delivery_ratio, delivery_tier, top_delivery, serialize_delivery_security)
from .breadth_utils import (compute_adr, resolve_change, rollup_groups, market_summary,
                            rollup_preopen_by_taxonomy, average_group_volumes)
from .imbalance_utils import rank_volume_imbalance
from .calendar_utils import VALID_PURPOSES, split_purposes, prepare_calendar_entries
from .webhook_utils import split_csv_field, parse_trigger_prices, parse_alert_payload, alerts_to_csv
from .stream_utils import ProgressChannel
from .news_utils import (NEWS_TYPES, NEWS_CATEGORIES, SENTIMENTS, GAP_TYPE_LABELS, gap_stock_prompt, market_prompt,
                         sector_prompt, news_record)

__all__ = [
    # Numeric
    "parse_numeric",
    "round2",
    "format_percentage",
    "safe_ratio",

    # Dates
    "now_ist",
    "today_ist",
    "utc_now",
    "is_date_key",
    "parse_date_key",
    "shift_date_key",
    "cutoff_datetime",
    "is_calendar_date",
    "parse_calendar_date",

    # Snapshots
    "drop_invalid_records",
    "normalize_preopen_security",
    "select_latest",
    "compute_breadth",
    "search_by_symbol",
    "low_spread_stocks",
    "high_volume_stocks",

    # Gaps
    "GAP_BUCKETS",
    "gap_bucket",
    "classify_gaps",

    # Delivery
    "delivery_percentage",
    "normalize_delivery_security",
    "summarize_delivery",
    "market_delivery_ratio",
    "delivery_tier",
    "top_delivery",
    "serialize_delivery_security",

    # Breadth
    "compute_adr",
    "resolve_change",
    "rollup_groups",
    "market_summary",
    "rollup_preopen_by_taxonomy",
    "average_group_volumes",

    # Imbalance
    "rank_volume_imbalance",

    # Calendar
    "VALID_PURPOSES",
    "split_purposes",
    "prepare_calendar_entries",

    # Webhooks
    "split_csv_field",
    "parse_trigger_prices",
    "parse_alert_payload",
    "alerts_to_csv",

    # Streaming
    "ProgressChannel",

    # News
    "NEWS_TYPES",
    "NEWS_CATEGORIES",
    "SENTIMENTS",
    "GAP_TYPE_LABELS",
    "gap_stock_prompt",
    "market_prompt",
    "sector_prompt",
    "news_record",
]
