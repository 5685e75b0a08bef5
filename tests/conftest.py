import json

import pytest

from market_dashboard.app import create_app
from market_dashboard.config import Config
from market_dashboard.db import db

TEST_DATE = "2025-07-10"

SECTOR_REFERENCE = [
    {
        "name": "Information Technology",
        "stocks": [
            {"symbol": "TCS", "companyName": "Tata Consultancy Services Ltd.", "marketCap": 1400000},
            {"symbol": "INFY", "companyName": "Infosys Ltd.", "marketCap": 655000},
        ],
    },
    {
        "name": "Financial Services",
        "stocks": [
            {"symbol": "HDFCBANK", "companyName": "HDFC Bank Ltd.", "marketCap": 1270000},
            {"symbol": "SBIN", "companyName": "State Bank of India", "marketCap": 725000},
        ],
    },
]

INDUSTRY_REFERENCE = [
    {"name": "IT - Software", "stocks": [{"symbol": "TCS"}, {"symbol": "INFY"}]},
    {"name": "Banks", "stocks": [{"symbol": "HDFCBANK"}, {"symbol": "SBIN"}]},
]


class FakeGrokAdaptor:
    """Stands in for the AI provider; records every prompt it receives"""

    def __init__(self, configured=True, response=None, fail_on=None):
        self.configured = configured
        self.response = response or {
            "headline": "Order win lifts shares",
            "reason": "Company announced a large order",
            "newsCategory": "ORDERS",
            "sentiment": "Bullish",
            "confidence": "High",
            "priceAction": "Continue",
            "details": "Order worth Rs 500 Cr",
        }
        self.fail_on = fail_on
        self.prompts = []

    @property
    def is_configured(self):
        return self.configured

    def analyze(self, prompt):
        from market_dashboard.errors import UpstreamError

        self.prompts.append(prompt)
        if self.fail_on and self.fail_on in prompt:
            raise UpstreamError("AI provider request failed")
        return dict(self.response)

    def test_connection(self):
        return {"reply": '{"status": "ok"}', "model": "fake", "responseTime": "0.0s"}


def make_security(symbol, p_change, quantity=1000, turnover=100000.0, spread=None, **extra):
    security = {
        "symbol": symbol,
        "lastPrice": 100 + p_change,
        "previousClose": 100,
        "pChange": p_change,
        "finalQuantity": quantity,
        "totalTurnover": turnover,
    }
    if spread is not None:
        security["spreadAnalysis"] = spread
    security.update(extra)
    return security


@pytest.fixture
def sample_securities():
    return [
        make_security("TCS", 4.5, quantity=5000),
        make_security("INFY", 2.0, quantity=3000),
        make_security("HDFCBANK", -1.5, quantity=4000),
        make_security("SBIN", -3.8, quantity=2000),
        make_security("RELIANCE", 0.4, quantity=1000),
    ]


@pytest.fixture
def app(tmp_path):
    sector_path = tmp_path / "sector_reference.json"
    industry_path = tmp_path / "industry_reference.json"
    sector_path.write_text(json.dumps(SECTOR_REFERENCE))
    industry_path.write_text(json.dumps(INDUSTRY_REFERENCE))

    class TestConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'test.db'}"
        APP_ENV = "test"
        PUBLIC_BASE_URL = None
        GROK_API_KEY = None
        AI_REQUEST_DELAY_SECONDS = 0
        SECTOR_REFERENCE_PATH = str(sector_path)
        INDUSTRY_REFERENCE_PATH = str(industry_path)

    app = create_app(TestConfig)
    app.extensions["grok_adaptor"] = FakeGrokAdaptor()
    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_ai(app):
    return app.extensions["grok_adaptor"]


@pytest.fixture
def seed_preopen(client, sample_securities):
    def _seed(securities=None, date=TEST_DATE, source="nse-scraper"):
        response = client.post("/api/preopen/receive", json={
            "date": date,
            "source": source,
            "data": securities if securities is not None else sample_securities,
        })
        assert response.status_code == 201
        return response.get_json()["data"]
    return _seed


def parse_sse(body):
    """Decode a text/event-stream body into its JSON events"""
    return [json.loads(line[len("data: "):]) for line in body.splitlines() if line.startswith("data: ")]
