from market_dashboard.app import create_app
from market_dashboard.config import Config
from market_dashboard.db import db


def test_health(client):
    body = client.get("/health").get_json()
    assert body["status"] == "OK"
    assert body["environment"] == "test"
    assert body["aiConfigured"] is True
    assert "stock-news" in body["features"]


def test_index_lists_endpoints(client):
    body = client.get("/").get_json()
    assert body["endpoints"]["webhookData"] == "/api/data"
    assert body["docs"] == "/swagger-ui"


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_validation_errors_are_bad_requests(client):
    response = client.post("/api/webhooks/create", json={"stockSet": "NIFTY_500"})
    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "Invalid request"
    assert "name" in body["details"]["json"]


def test_app_starts_with_corrupt_reference_file(tmp_path):
    sector_path = tmp_path / "sector_reference.json"
    sector_path.write_text("{not json")

    class CorruptReferenceConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'startup.db'}"
        APP_ENV = "test"
        SECTOR_REFERENCE_PATH = str(sector_path)
        INDUSTRY_REFERENCE_PATH = str(tmp_path / "missing.json")

    app = create_app(CorruptReferenceConfig)
    client = app.test_client()

    assert client.get("/health").status_code == 200
    assert client.get("/api/intraday-analysis/reference").get_json()["data"]["sectors"] == 0
    response = client.post("/api/webhooks/create", json={"name": "Breakouts", "stockSet": "NIFTY_500"})
    assert response.status_code == 201

    with app.app_context():
        db.session.remove()
        db.drop_all()
