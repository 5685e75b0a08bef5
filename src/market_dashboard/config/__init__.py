from .app_config import (MARKET_TIMEZONE, DATE_KEY_FORMAT, GapConfig, DeliveryConfig, ImbalanceConfig,
                         PreopenConfig, StoreConfig, AIConfig)
from .flask_config import Config
from .logger_config import setup_logger
from .reference_config import ReferenceStock, ReferenceGroup, ReferenceData


__all__ = [
    #AppConfig
    "MARKET_TIMEZONE",
    "DATE_KEY_FORMAT",
    "GapConfig",
    "DeliveryConfig",
    "ImbalanceConfig",
    "PreopenConfig",
    "StoreConfig",
    "AIConfig",

    #FlaskConfig
    "Config",

    #Logger Config
    "setup_logger",

    #Reference Config
    "ReferenceStock",
    "ReferenceGroup",
    "ReferenceData",
]
