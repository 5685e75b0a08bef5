import os


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///market_dashboard.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    APP_ENV = os.getenv("APP_ENV", "development")
    PORT = int(os.getenv("PORT", "8080"))
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL")

    GROK_API_KEY = os.getenv("GROK_API_KEY")
    GROK_API_URL = os.getenv("GROK_API_URL", "https://api.x.ai/v1/chat/completions")
    GROK_MODEL = os.getenv("GROK_MODEL", "grok-4")
    AI_REQUEST_DELAY_SECONDS = float(os.getenv("AI_REQUEST_DELAY_SECONDS", "1.0"))

    SECTOR_REFERENCE_PATH = os.getenv("SECTOR_REFERENCE_PATH", "data/sector_reference.json")
    INDUSTRY_REFERENCE_PATH = os.getenv("INDUSTRY_REFERENCE_PATH", "data/industry_reference.json")

    API_TITLE = "Market Data Dashboard"
    API_VERSION = "v1"
    OPENAPI_VERSION = "3.0.3"
    OPENAPI_URL_PREFIX = "/"
    OPENAPI_SWAGGER_UI_PATH = "/swagger-ui"
    OPENAPI_SWAGGER_UI_URL = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"
    OPENAPI_REDOC_PATH = "/redoc"
    OPENAPI_REDOC_URL = "https://cdn.jsdelivr.net/npm/redoc@latest/bundles/redoc.standalone.js"
    API_SPEC_OPTIONS = {
        "tags": [
            # Market Snapshots
            {"name": "Pre-open", "description": "Pre-open auction snapshots and analysis"},
            {"name": "Delivery Volume", "description": "Delivery volume snapshots and analysis"},
            {"name": "Intraday Analysis", "description": "Sector and industry advance/decline rollups"},
            # Reference Data
            {"name": "Stocks", "description": "Stock master records"},
            {"name": "Financial Calendar", "description": "Corporate event calendar"},
            # Alerts
            {"name": "Webhooks", "description": "Webhook registry and receiver"},
            {"name": "Webhook Data", "description": "Stored webhook alert events"},
            # News
            {"name": "Stock News", "description": "AI-analyzed stock news"},
        ],
        "x-tagGroups": [
            {"name": "Market Snapshots", "tags": ["Pre-open", "Delivery Volume", "Intraday Analysis"]},
            {"name": "Reference Data", "tags": ["Stocks", "Financial Calendar"]},
            {"name": "Alerts", "tags": ["Webhooks", "Webhook Data"]},
            {"name": "News", "tags": ["Stock News"]},
        ]
    }
