from conftest import TEST_DATE, make_security


def test_run_analysis_rolls_up_reference_groups(client, seed_preopen):
    seed_preopen()

    response = client.post("/api/intraday-analysis/run-analysis", json={"date": TEST_DATE})
    assert response.status_code == 200
    data = response.get_json()["data"]

    sectors = {row["name"]: row for row in data["sectorAnalysis"]}
    it = sectors["Information Technology"]
    assert (it["advances"], it["declines"], it["adr"]) == (2, 0, 2.0)
    assert it["avgPreOpenVolume"] == 8000
    financials = sectors["Financial Services"]
    assert (financials["advances"], financials["declines"], financials["adr"]) == (0, 2, 0.0)

    assert [row["name"] for row in data["industryAnalysis"]] == ["IT - Software", "Banks"]

    summary = data["summary"]
    assert summary["totalStocks"] == 4
    assert summary["marketAdvances"] == 2
    assert summary["marketDeclines"] == 2
    assert summary["marketADR"] == 1.0
    assert summary["hasPreopenData"] is True
    assert data["referenceSource"] == "files"


def test_run_analysis_without_preopen_falls_back_to_zero(client):
    data = client.post("/api/intraday-analysis/run-analysis", json={"date": TEST_DATE}).get_json()["data"]
    assert data["summary"]["hasPreopenData"] is False
    assert data["summary"]["marketUnchanged"] == 4
    assert data["summary"]["changeSources"] == {"none": 4}


def test_rerun_overwrites_and_load_returns_it(client, seed_preopen):
    seed_preopen()
    client.post("/api/intraday-analysis/run-analysis", json={"date": TEST_DATE})
    seed_preopen([make_security("TCS", -2.0), make_security("INFY", -1.0)])
    client.post("/api/intraday-analysis/run-analysis", json={"date": TEST_DATE})

    assert client.get("/api/intraday-analysis/available-dates").get_json()["data"] == [TEST_DATE]

    data = client.post("/api/intraday-analysis/load", json={"date": TEST_DATE}).get_json()["data"]
    it = next(row for row in data["sectorAnalysis"] if row["name"] == "Information Technology")
    assert it["declines"] == 2


def test_load_without_analysis_returns_null(client):
    body = client.post("/api/intraday-analysis/load", json={"date": TEST_DATE}).get_json()
    assert body["success"] is True
    assert body["data"] is None


def test_run_analysis_requires_date(client):
    response = client.post("/api/intraday-analysis/run-analysis", json={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid request"


def test_twenty_day_average(client, seed_preopen):
    seed_preopen()
    seed_preopen([make_security("TCS", 1.0, quantity=1000), make_security("INFY", 1.0, quantity=1000)],
                 date="2025-07-09")
    seed_preopen([make_security("TCS", 1.0, quantity=99999)], date="2025-06-01")

    data = client.post("/api/intraday-analysis/preopen-20day-average", json={"endDate": TEST_DATE}).get_json()["data"]

    assert data["daysAnalyzed"] == 2
    assert data["periodStart"] == "2025-06-20"
    assert data["periodEnd"] == TEST_DATE
    assert data["sectorAverages"]["Information Technology"] == {"avgVolume": 5000, "dayCount": 2}
    assert data["sectorAverages"]["Financial Services"] == {"avgVolume": 3000, "dayCount": 2}


def test_preopen_by_date(client, seed_preopen):
    seed_preopen()
    data = client.post("/api/intraday-analysis/preopen-by-date", json={"date": TEST_DATE}).get_json()["data"]
    assert data["totalStocks"] == 5
    assert len(data["data"]) == 5

    body = client.post("/api/intraday-analysis/preopen-by-date", json={"date": "2025-01-01"}).get_json()
    assert body["data"] is None


def test_cleanup_deletes_old_analyses(client):
    client.post("/api/intraday-analysis/run-analysis", json={"date": TEST_DATE})

    response = client.delete("/api/intraday-analysis/cleanup", json={"daysToKeep": 0})
    assert response.get_json()["data"]["deletedCount"] == 1
    assert client.get("/api/intraday-analysis/available-dates").get_json()["data"] == []


def test_reference_summary_and_reload(client):
    summary = client.get("/api/intraday-analysis/reference").get_json()["data"]
    assert summary["source"] == "files"
    assert summary["sectors"] == 2
    assert summary["sectorStocks"] == 4

    client.post("/api/stocks/create", json={"symbol": "TCS", "companyName": "TCS", "sector": "IT",
                                            "industry": "Software", "marketCap": 100})
    reloaded = client.post("/api/intraday-analysis/reload-reference", json={"source": "stock-master"})
    assert reloaded.get_json()["data"]["source"] == "stock-master"
    assert reloaded.get_json()["data"]["sectors"] == 1

    assert client.post("/api/intraday-analysis/reload-reference", json={"source": "ftp"}).status_code == 400


def test_reload_with_corrupt_file_keeps_current_reference(app, client):
    with open(app.config["SECTOR_REFERENCE_PATH"], "w") as fh:
        fh.write("{not json")

    response = client.post("/api/intraday-analysis/reload-reference", json={"source": "files"})

    assert response.status_code == 500
    assert response.get_json()["error"] == "Failed to load reference file sector_reference.json"
    summary = client.get("/api/intraday-analysis/reference").get_json()["data"]
    assert summary["source"] == "files"
    assert summary["sectors"] == 2
