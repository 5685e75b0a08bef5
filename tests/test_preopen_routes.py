from conftest import TEST_DATE, make_security
from market_dashboard.utils import today_ist


def test_receive_and_read_back(client, seed_preopen):
    stored = seed_preopen()
    assert stored["date"] == TEST_DATE
    assert stored["totalStocks"] == 5

    response = client.get(f"/api/preopen/data/{TEST_DATE}")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["id"] == stored["id"]
    assert data["source"] == "nse-scraper"
    assert data["totalStocks"] == 5
    assert (data["advances"], data["declines"], data["unchanged"]) == (3, 2, 0)
    assert data["totalVolume"] == 15000
    assert [s["symbol"] for s in data["stocks"]] == ["TCS", "INFY", "HDFCBANK", "SBIN", "RELIANCE"]


def test_latest_snapshot_wins(client, seed_preopen):
    seed_preopen([make_security("TCS", 1.0)])
    latest = seed_preopen([make_security("TCS", 2.0), make_security("INFY", -1.0)])

    data = client.get(f"/api/preopen/data/{TEST_DATE}").get_json()["data"]
    assert data["id"] == latest["id"]
    assert data["totalStocks"] == 2


def test_malformed_records_are_dropped(client, seed_preopen):
    stored = seed_preopen([make_security("TCS", 1.0), "garbage", None])
    assert stored["totalStocks"] == 1


def test_missing_snapshot_returns_hint(client):
    response = client.get("/api/preopen/data/2025-01-01")
    assert response.status_code == 404
    body = response.get_json()
    assert body["success"] is False
    assert body["error"] == "No preopen data found for this date"
    assert body["message"] == "Please upload data for this date or select a different date"
    assert body["date"] == "2025-01-01"


def test_invalid_date_is_rejected(client):
    response = client.get("/api/preopen/data/10-07-2025")
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid date '10-07-2025'. Expected YYYY-MM-DD"


def test_receive_requires_data_array(client):
    response = client.post("/api/preopen/receive", json={"date": TEST_DATE})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid request"

    response = client.post("/api/preopen/receive", json={"date": TEST_DATE, "data": {"symbol": "TCS"}})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid data format. Expected array of stocks."


def test_legacy_store_uses_today(client):
    response = client.post("/api/preopen/store", json=[make_security("TCS", 1.0)])
    assert response.status_code == 201
    assert response.get_json()["data"]["date"] == today_ist()

    stats = client.get("/api/preopen/stats").get_json()["data"]
    assert stats["hasData"] is True
    assert stats["source"] == "legacy-api"
    assert stats["dataFormat"] == "legacy"


def test_stats_without_data(client):
    response = client.get(f"/api/preopen/stats/{TEST_DATE}")
    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["hasData"] is False
    assert data["date"] == TEST_DATE


def test_search_is_case_insensitive_substring(client, seed_preopen):
    seed_preopen()
    data = client.get(f"/api/preopen/search/{TEST_DATE}/bank").get_json()["data"]
    assert data["totalMatches"] == 1
    assert data["stocks"][0]["symbol"] == "HDFCBANK"


def test_dates_lists_each_date_once(client, seed_preopen):
    seed_preopen(date="2025-07-09")
    seed_preopen()
    seed_preopen()

    data = client.get("/api/preopen/dates").get_json()["data"]
    assert data["totalDates"] == 2
    assert [d["date"] for d in data["dates"]] == [TEST_DATE, "2025-07-09"]


def test_delete_removes_all_snapshots_for_date(client, seed_preopen):
    seed_preopen()
    seed_preopen()

    response = client.delete(f"/api/preopen/data/{TEST_DATE}")
    assert response.status_code == 200
    assert response.get_json()["data"]["deletedCount"] == 2
    assert client.get(f"/api/preopen/data/{TEST_DATE}").status_code == 404
    assert client.delete(f"/api/preopen/data/{TEST_DATE}").status_code == 404


def test_gap_analysis(client, seed_preopen):
    seed_preopen()
    data = client.get(f"/api/preopen/analysis/gaps/{TEST_DATE}").get_json()["data"]

    assert [e["symbol"] for e in data["strongGapUp"]] == ["TCS"]
    assert [e["symbol"] for e in data["moderateGapUp"]] == ["INFY"]
    assert [e["symbol"] for e in data["moderateGapDown"]] == ["HDFCBANK"]
    assert [e["symbol"] for e in data["strongGapDown"]] == ["SBIN"]
    assert data["summary"]["strongGapUpCount"] == 1


def test_gap_analysis_limit_query(client, seed_preopen):
    seed_preopen([make_security(f"S{i}", 5 + i) for i in range(4)])
    data = client.get(f"/api/preopen/analysis/gaps/{TEST_DATE}?limit=2").get_json()["data"]
    assert len(data["strongGapUp"]) == 2
    assert data["summary"]["strongGapUpCount"] == 4


def test_volume_imbalance(client, seed_preopen):
    seed_preopen([
        make_security("TCS", 1.0, spread={"volumeDominantSide": "BID", "volumeImbalancePercent": 62.5}),
        make_security("INFY", -1.0, spread={"volumeDominantSide": "ask", "volumeImbalancePercent": "30"}),
        make_security("SBIN", 0.5),
    ])
    data = client.get(f"/api/preopen/analysis/volume-imbalance/{TEST_DATE}").get_json()["data"]

    assert [e["symbol"] for e in data["bidDominantStocks"]] == ["TCS"]
    assert [e["symbol"] for e in data["askDominantStocks"]] == ["INFY"]
    assert data["summary"]["strongBidImbalance"] == 1
    assert data["summary"]["strongAskImbalance"] == 0


def test_spreads_and_volume(client, seed_preopen):
    seed_preopen([
        make_security("TCS", 1.0, quantity=500, spread={"spreadPercent": 0.05}),
        make_security("INFY", 1.0, quantity=900, spread={"spreadPercent": 2.5}),
    ])

    spreads = client.get(f"/api/preopen/analysis/spreads/{TEST_DATE}?threshold=1").get_json()["data"]
    assert spreads["threshold"] == 1.0
    assert [s["symbol"] for s in spreads["stocks"]] == ["TCS"]

    volume = client.get(f"/api/preopen/analysis/volume/{TEST_DATE}").get_json()["data"]
    assert [s["symbol"] for s in volume["stocks"]] == ["INFY", "TCS"]


def test_industry_analysis_uses_stock_master(client, seed_preopen):
    for symbol, sector in (("TCS", "IT"), ("INFY", "IT"), ("SBIN", "Financials")):
        client.post("/api/stocks/create", json={"symbol": symbol, "companyName": symbol, "sector": sector,
                                                "industry": f"{sector} Industry", "marketCap": 1000})
    seed_preopen()

    data = client.get(f"/api/preopen/analysis/industry/{TEST_DATE}").get_json()["data"]
    names = {row["name"]: row for row in data["analysis"]}
    assert set(names) == {"IT", "Financials"}
    assert names["IT"]["stockCount"] == 2
    assert names["IT"]["avgChange"] == 3.25
    assert data["summary"]["mostBearish"] == "Financials"

    response = client.get(f"/api/preopen/analysis/industry/{TEST_DATE}?level=region")
    assert response.status_code == 400
