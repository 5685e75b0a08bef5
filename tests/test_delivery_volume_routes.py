import pytest

from conftest import TEST_DATE


@pytest.fixture
def seeded(client):
    response = client.post("/api/delivery-volume/receive", json={
        "date": TEST_DATE,
        "data": [
            {"symbol": "TCS", "quantityTraded": 1000, "deliveryQuantity": 750},
            {"symbol": "INFY", "quantityTraded": "2,000", "deliveryQuantity": "700"},
            {"symbol": "SBIN", "quantityTraded": 0, "deliveryQuantity": 0},
        ],
    })
    assert response.status_code == 201
    return response.get_json()["data"]


def test_receive_summarizes_snapshot(seeded):
    assert seeded["totalSecurities"] == 3
    assert seeded["avgDeliveryPercentage"] == 36.67
    assert seeded["highDeliveryCount"] == 1
    assert seeded["marketDeliveryRatio"] == 48.33


def test_data_renders_percentages_as_strings(client, seeded):
    data = client.get(f"/api/delivery-volume/data/{TEST_DATE}").get_json()["data"]
    assert data["dataFormat"] == "securityWiseDP"
    assert [s["deliveryPercentage"] for s in data["securities"]] == ["75.00", "35.00", "0.00"]
    assert data["summary"]["marketDeliveryRatio"] == 48.33


def test_search_exact_symbol(client, seeded):
    data = client.get(f"/api/delivery-volume/search/{TEST_DATE}/tcs").get_json()["data"]
    assert data["security"]["symbol"] == "TCS"
    assert data["security"]["deliveryPercentage"] == "75.00"

    response = client.get(f"/api/delivery-volume/search/{TEST_DATE}/TC")
    assert response.status_code == 404
    assert response.get_json()["error"] == f"Security TC not found for date {TEST_DATE}"


def test_top_delivery(client, seeded):
    data = client.get(f"/api/delivery-volume/analysis/top-delivery/{TEST_DATE}").get_json()["data"]
    assert [s["symbol"] for s in data["topDeliveryStocks"]] == ["TCS", "INFY"]
    assert data["topDeliveryStocks"][0]["deliveryPercentage"] == 75.0
    assert data["tiers"] == {"veryHigh": 1, "high": 0, "moderate": 1}
    assert data["criteria"] == {"minDeliveryPercent": 30.0, "limit": 50}

    data = client.get(f"/api/delivery-volume/analysis/top-delivery/{TEST_DATE}?minPercent=50").get_json()["data"]
    assert data["totalFound"] == 1

    response = client.get(f"/api/delivery-volume/analysis/top-delivery/{TEST_DATE}?minPercent=150")
    assert response.status_code == 400


def test_missing_date_and_delete(client, seeded):
    assert client.get("/api/delivery-volume/data/2025-01-01").status_code == 404

    dates = client.get("/api/delivery-volume/dates").get_json()["data"]
    assert dates["dates"][0]["avgDeliveryPercentage"] == 36.67

    response = client.delete(f"/api/delivery-volume/data/{TEST_DATE}")
    assert response.get_json()["data"]["deletedCount"] == 1
    assert client.get(f"/api/delivery-volume/data/{TEST_DATE}").status_code == 404
