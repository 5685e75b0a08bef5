import pytest

from conftest import TEST_DATE, parse_sse

GAP_REQUEST = {"symbol": "TCS", "gapPercent": 4.5, "gapType": "Strong Gap Up", "date": TEST_DATE}


def test_fetch_stock_news_is_cached(client, fake_ai):
    first = client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST).get_json()
    assert first["cached"] is False
    assert first["data"]["symbol"] == "TCS"
    assert first["data"]["headline"] == "Order win lifts shares"
    assert first["data"]["newsCategory"] == "ORDERS"
    assert first["data"]["type"] == "GAP_ANALYSIS"

    second = client.post("/api/stock-news/fetch-stock-news", json={**GAP_REQUEST, "symbol": "tcs"}).get_json()
    assert second["cached"] is True
    assert second["data"]["id"] == first["data"]["id"]
    assert len(fake_ai.prompts) == 1


def test_fetch_stock_news_validation(client, fake_ai):
    response = client.post("/api/stock-news/fetch-stock-news", json={"symbol": "TCS", "date": TEST_DATE})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Symbol, gapPercent, and date are required"

    fake_ai.configured = False
    response = client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)
    assert response.status_code == 400
    assert response.get_json()["error"] == "API key not configured"


def test_provider_failure_is_reported(client, fake_ai):
    fake_ai.fail_on = "TCS"
    response = client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)
    assert response.status_code == 500
    assert response.get_json()["error"] == "AI provider request failed"


def test_unknown_ai_fields_are_normalized(client, fake_ai):
    fake_ai.response = {"headline": "Quiet", "sentiment": "Euphoric", "newsCategory": "RUMOUR"}
    data = client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST).get_json()["data"]
    assert data["sentiment"] == "Neutral"
    assert data["newsCategory"] == "NO_NEWS"


def test_gap_news_lookups(client):
    client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)

    assert client.get(f"/api/stock-news/gap-news/TCS/{TEST_DATE}").get_json()["data"]["gapPercent"] == 4.5

    response = client.get(f"/api/stock-news/gap-news/INFY/{TEST_DATE}")
    assert response.status_code == 404
    assert response.get_json()["error"] == f"No gap news found for INFY on {TEST_DATE}"

    body = client.get(f"/api/stock-news/gap-news-date/{TEST_DATE}").get_json()
    assert body["count"] == 1


def test_search_news(client):
    client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)
    client.post("/api/stock-news/fetch-stock-news", json={**GAP_REQUEST, "symbol": "INFY", "date": "2025-07-11"})

    assert client.post("/api/stock-news/search-news", json={"type": "GAP_ANALYSIS"}).get_json()["count"] == 2
    assert client.post("/api/stock-news/search-news", json={"date": TEST_DATE}).get_json()["count"] == 1
    assert client.post("/api/stock-news/search-news", json={"sentiment": "Bearish"}).get_json()["count"] == 0
    assert client.post("/api/stock-news/search-news", json={"type": "GOSSIP"}).status_code == 400


def test_gap_news_batch_stream(client, fake_ai):
    client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)
    fake_ai.fail_on = "SBIN"

    response = client.post("/api/stock-news/fetch-gap-news-batch", json={
        "date": TEST_DATE,
        "stocks": [
            {"symbol": "TCS", "gap": 4.5, "gapType": "Strong Gap Up"},
            {"symbol": "INFY", "gap": 2.0},
            {"symbol": "SBIN", "gap": -3.8},
        ],
    })
    assert response.mimetype == "text/event-stream"
    assert response.headers["Cache-Control"] == "no-cache"
    events = parse_sse(response.get_data(as_text=True))

    assert [e["type"] for e in events] == [
        "start",
        "progress", "stock_complete",
        "progress", "stock_complete",
        "progress", "stock_error",
        "complete",
    ]
    assert events[2]["status"] == "cached"
    assert events[4]["status"] == "fetched"
    assert events[4]["headline"] == "Order win lifts shares"
    assert events[-1]["summary"] == {"total": 3, "successful": 2, "cached": 1, "errors": 1}


def test_gap_news_batch_validation(client, fake_ai):
    response = client.post("/api/stock-news/fetch-gap-news-batch", json={"date": TEST_DATE, "stocks": []})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Stocks array is required"

    fake_ai.configured = False
    response = client.post("/api/stock-news/fetch-gap-news-batch",
                           json={"date": TEST_DATE, "stocks": [{"symbol": "TCS", "gap": 4.5}]})
    assert response.status_code == 400
    assert response.get_json()["error"] == "API key not configured"


def test_morning_news_analysis_stream(client, fake_ai, seed_preopen):
    client.post("/api/stocks/create", json={"symbol": "TCS", "companyName": "Tata Consultancy Services",
                                            "sector": "Information Technology", "marketCap": 1400000})
    client.post("/api/stocks/create", json={"symbol": "INFY", "companyName": "Infosys",
                                            "sector": "Information Technology", "marketCap": 655000})
    seed_preopen()

    response = client.post("/api/stock-news/morning-news-analysis", json={"date": TEST_DATE})
    events = parse_sse(response.get_data(as_text=True))

    assert [e["type"] for e in events] == [
        "start",
        "market_complete",
        "gap_complete", "gap_complete", "gap_complete", "gap_complete",
        "sector_complete",
        "complete",
    ]
    assert [e["symbol"] for e in events if e["type"] == "gap_complete"] == ["TCS", "INFY", "HDFCBANK", "SBIN"]
    progress = [e["progress"] for e in events]
    assert progress[0] == 0
    assert progress[-1] == 100
    assert progress == sorted(progress)

    tcs = events[2]["data"]
    assert tcs["companyName"] == "Tata Consultancy Services"
    assert tcs["gapType"] == "Strong Gap Up"
    assert events[6]["sector"] == "Information Technology"
    assert events[-1]["summary"]["GAP_ANALYSIS"] == 4
    assert len(fake_ai.prompts) == 6


def test_morning_news_analysis_reports_step_errors(client, fake_ai, seed_preopen):
    seed_preopen()
    fake_ai.fail_on = "SBIN"

    events = parse_sse(client.post("/api/stock-news/morning-news-analysis",
                                   json={"date": TEST_DATE}).get_data(as_text=True))

    errors = [e for e in events if e["type"] == "gap_error"]
    assert [e["symbol"] for e in errors] == ["SBIN"]
    assert events[-1]["type"] == "complete"
    assert events[-1]["summary"]["errors"] == 1


def test_morning_news_analysis_without_snapshot(client):
    events = parse_sse(client.post("/api/stock-news/morning-news-analysis",
                                   json={"date": TEST_DATE}).get_data(as_text=True))
    assert len(events) == 1
    assert events[0]["type"] == "error"
    assert events[0]["progress"] == 100


@pytest.mark.parametrize("url, body", [
    ("/api/stock-news/morning-news-analysis", {"date": "not-a-date"}),
    ("/api/stock-news/fetch-gap-news-batch", {"date": "10-07-2025", "stocks": [{"symbol": "TCS", "gap": 4.5}]}),
])
def test_streams_reject_malformed_date_before_streaming(client, fake_ai, url, body):
    response = client.post(url, json=body)

    assert response.status_code == 400
    assert response.mimetype == "application/json"
    assert response.get_json()["error"] == f"Invalid date '{body['date']}'. Expected YYYY-MM-DD"
    assert fake_ai.prompts == []


def test_cleanup_and_test_ai(client, fake_ai):
    client.post("/api/stock-news/fetch-stock-news", json=GAP_REQUEST)

    result = client.delete("/api/stock-news/cleanup", json={"daysToKeep": 0}).get_json()["data"]
    assert result["deletedCount"] == 1

    body = client.get("/api/stock-news/test-ai").get_json()
    assert body["success"] is True
    assert body["data"]["model"] == "fake"

    fake_ai.configured = False
    assert client.get("/api/stock-news/test-ai").status_code == 400
