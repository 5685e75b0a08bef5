import pytest

from market_dashboard.utils import today_ist


@pytest.fixture
def webhook(client):
    response = client.post("/api/webhooks/create", json={
        "name": "Morning Breakouts",
        "stockSet": "NIFTY_500",
        "tags": ["momentum", "breakout"],
        "description": "Opening range breakouts",
    })
    assert response.status_code == 201
    return response.get_json()["data"]


def _alert(client, webhook_id, **fields):
    form = {
        "stocks": "TCS,INFY",
        "trigger_prices": "3500.5,1500",
        "triggered_at": "9:20 am",
        "scan_name": "Breakout Scan",
        "scan_url": "breakout-scan",
        "alert_name": "Alert for Breakout Scan",
    }
    form.update(fields)
    return client.post(f"/api/webhooks/receive/{webhook_id}", data=form)


def test_create_builds_callback_url(webhook):
    assert webhook["webhookUrl"] == f"http://localhost/api/webhooks/receive/{webhook['id']}"
    assert webhook["stockSet"] == "NIFTY_500"
    assert webhook["tags"] == ["momentum", "breakout"]


def test_create_rejects_unknown_stock_set(client):
    response = client.post("/api/webhooks/create", json={"name": "x", "stockSet": "NIFTY_50"})
    assert response.status_code == 400


def test_public_base_url_and_production_scheme(app, client):
    app.config["PUBLIC_BASE_URL"] = "http://dashboard.example.com/"
    app.config["APP_ENV"] = "production"

    data = client.post("/api/webhooks/create", json={"name": "x", "stockSet": "ANY_WEBHOOK"}).get_json()["data"]
    assert data["webhookUrl"] == f"https://dashboard.example.com/api/webhooks/receive/{data['id']}"


def test_update_list_and_possible_outputs(client, webhook):
    response = client.put(f"/api/webhooks/update/{webhook['id']}", json={"name": "Renamed", "tags": ["gap"]})
    assert response.get_json()["data"]["name"] == "Renamed"

    client.put(f"/api/webhooks/{webhook['id']}/possible-output", json={"possibleOutput": "5-10 stocks"})

    listing = client.get("/api/webhooks/list").get_json()["data"]
    assert [w["name"] for w in listing] == ["Renamed"]

    outputs = client.get("/api/webhooks/possible-outputs/list").get_json()["data"]
    assert outputs == [{
        "webhookId": webhook["id"],
        "webhookName": "Renamed",
        "possibleOutput": "5-10 stocks",
        "description": "Opening range breakouts",
    }]


def test_unknown_webhook(client):
    assert client.get("/api/webhooks/missing").status_code == 404
    response = _alert(client, "missing")
    assert response.status_code == 404
    assert response.get_json()["error"] == "Webhook not found"


def test_receive_form_payload(client, webhook):
    response = _alert(client, webhook["id"])
    assert response.status_code == 200
    alert = response.get_json()["data"]

    assert alert["stocks"] == ["TCS", "INFY"]
    assert alert["triggerPrices"] == [3500.5, 1500.0]
    assert alert["webhookName"] == "Morning Breakouts"
    assert alert["tags"] == ["momentum", "breakout"]
    assert alert["stockSet"] == "NIFTY_500"
    assert alert["date"] == today_ist()


def test_receive_json_payload(client, webhook):
    response = client.post(f"/api/webhooks/receive/{webhook['id']}",
                           json={"stocks": "SBIN", "trigger_prices": "800", "scan_name": "Gap"})
    assert response.get_json()["data"]["stocks"] == ["SBIN"]


def test_search_filters_and_overview(client, webhook):
    _alert(client, webhook["id"])
    _alert(client, webhook["id"], scan_name="Reversal Scan")

    all_alerts = client.get("/api/data/search").get_json()
    assert all_alerts["total"] == 2

    by_scanner = client.get("/api/data/search", query_string={"scanner": "Reversal Scan"}).get_json()
    assert by_scanner["total"] == 1

    by_tag = client.get("/api/data/search?tag=momentum&limit=1").get_json()
    assert by_tag["total"] == 1
    assert client.get("/api/data/search?tag=swing").get_json()["total"] == 0

    options = client.get("/api/data/search-options").get_json()["data"]
    assert options == {"scanners": ["Breakout Scan", "Reversal Scan"], "tags": ["breakout", "momentum"]}

    overview = client.get("/api/data/stats/overview").get_json()["data"]
    assert overview == {"totalData": 2, "todayData": 2, "weekData": 2, "uniqueWebhooks": 1}


def test_alerts_survive_webhook_deletion(client, webhook):
    alert = _alert(client, webhook["id"]).get_json()["data"]

    assert client.delete(f"/api/webhooks/delete/{webhook['id']}").status_code == 200
    assert client.get(f"/api/webhooks/{webhook['id']}").status_code == 404

    stored = client.get(f"/api/data/{alert['id']}").get_json()["data"]
    assert stored["webhookName"] == "Morning Breakouts"


def test_export_csv(client, webhook):
    _alert(client, webhook["id"])
    response = client.get("/api/data/export")

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert "attachment; filename=webhook-data-" in response.headers["Content-Disposition"]
    lines = response.get_data(as_text=True).strip().splitlines()
    assert lines[0] == "Date,Webhook Name,Scanner Name,Stocks,Triggered At,Tags,Stock Set"
    assert "TCS; INFY" in lines[1]


def test_delete_and_bulk_delete(client, webhook):
    first = _alert(client, webhook["id"]).get_json()["data"]
    second = _alert(client, webhook["id"]).get_json()["data"]
    third = _alert(client, webhook["id"]).get_json()["data"]

    assert client.delete(f"/api/data/delete/{first['id']}").status_code == 200
    assert client.get(f"/api/data/{first['id']}").status_code == 404

    response = client.delete("/api/data/bulk-delete", json={"ids": [second["id"], third["id"], "unknown"]})
    assert response.get_json()["data"]["deletedCount"] == 2

    response = client.delete("/api/data/bulk-delete", json={"ids": []})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid IDs provided"
