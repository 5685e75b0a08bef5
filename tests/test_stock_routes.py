import pytest


@pytest.fixture
def stocks(client):
    created = {}
    for symbol, name, sector, industry, market_cap in (
        ("tcs", "Tata Consultancy Services", "Information Technology", "IT - Software", 1400000),
        ("INFY", "Infosys", "Information Technology", "IT - Software", 655000),
        ("HDFCBANK", "HDFC Bank", "Financial Services", "Banks", 1270000),
    ):
        response = client.post("/api/stocks/create", json={
            "symbol": symbol,
            "companyName": name,
            "sector": sector,
            "industry": industry,
            "marketCap": market_cap,
        })
        assert response.status_code == 201
        created[symbol.upper()] = response.get_json()["data"]
    return created


def test_create_normalizes_symbol(stocks):
    assert stocks["TCS"]["symbol"] == "TCS"
    assert stocks["TCS"]["marketCap"] == 1400000
    assert stocks["TCS"]["pChange"] is None


def test_duplicate_symbol_rejected(client, stocks):
    response = client.post("/api/stocks/create", json={"symbol": "Tcs", "companyName": "Again"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Stock with this symbol already exists"


def test_create_requires_company_name(client):
    assert client.post("/api/stocks/create", json={"symbol": "TCS"}).status_code == 400


def test_get_update_delete(client, stocks):
    stock_id = stocks["INFY"]["id"]
    assert client.get(f"/api/stocks/{stock_id}").get_json()["data"]["companyName"] == "Infosys"

    response = client.put(f"/api/stocks/update/{stock_id}", json={"companyName": "Infosys Ltd", "pChange": 1.5})
    data = response.get_json()["data"]
    assert data["companyName"] == "Infosys Ltd"
    assert data["pChange"] == 1.5
    assert data["sector"] == "Information Technology"

    response = client.put(f"/api/stocks/update/{stock_id}", json={"symbol": "TCS"})
    assert response.status_code == 400

    assert client.delete(f"/api/stocks/delete/{stock_id}").status_code == 200
    assert client.get(f"/api/stocks/{stock_id}").status_code == 404


def test_search_with_pagination(client, stocks):
    body = client.post("/api/stocks/search", json={"sector": "Information Technology", "limit": 1}).get_json()
    assert [s["symbol"] for s in body["data"]] == ["TCS"]
    assert body["pagination"] == {"total": 2, "limit": 1, "offset": 0, "hasMore": True}

    body = client.post("/api/stocks/search", json={"minMarketCap": 1000000}).get_json()
    assert [s["symbol"] for s in body["data"]] == ["TCS", "HDFCBANK"]

    body = client.post("/api/stocks/search", json={"companyName": "bank"}).get_json()
    assert [s["symbol"] for s in body["data"]] == ["HDFCBANK"]


def test_filter_options_and_stats(client, stocks):
    options = client.get("/api/stocks/filter-options").get_json()["data"]
    assert options["sectors"] == ["Financial Services", "Information Technology"]
    assert options["industries"] == ["Banks", "IT - Software"]
    assert options["marketCapStats"]["max"] == 1400000

    stats = client.get("/api/stocks/stats/count").get_json()["data"]
    assert stats["totalStocks"] == 3
    assert stats["sectors"] == 2


def test_top_by_sector(client, stocks):
    data = client.get("/api/stocks/top/sector").get_json()["data"]
    assert set(data) == {"Information Technology", "Financial Services"}
    assert data["Information Technology"]["stockCount"] == 2
    assert data["Information Technology"]["totalMarketCap"] == 2055000
    assert [s["symbol"] for s in data["Information Technology"]["stocks"]] == ["TCS", "INFY"]

    one = client.get("/api/stocks/top/industry/Banks").get_json()["data"]
    assert list(one) == ["Banks"]
    assert client.get("/api/stocks/top/sector/Energy").status_code == 404


def test_top_overall_and_symbol_list(client, stocks):
    body = client.get("/api/stocks/top/overall?limit=2").get_json()
    assert [s["symbol"] for s in body["data"]] == ["TCS", "HDFCBANK"]
    assert body["total"] == 2

    body = client.get("/api/stocks/list").get_json()
    assert body["data"] == ["HDFCBANK", "INFY", "TCS"]


def test_import_upserts_by_symbol(client, stocks):
    response = client.post("/api/stocks/import", json={"data": [
        {"Symbol": "tcs", "Company Name": "TCS Ltd", "Sector": "Information Technology", "Market Cap": "1,450,000"},
        {"Symbol": "", "Company Name": "Nameless"},
        {"Symbol": "SBIN", "Company Name": "State Bank of India", "Sector": "Financial Services",
         "Market Cap": "725000"},
        {"Symbol": "SBIN", "Company Name": "State Bank of India Ltd", "Market Cap": "730000"},
    ]})
    data = response.get_json()["data"]

    assert data["totalRows"] == 4
    assert data["created"] == 1
    assert data["updated"] == 1
    assert data["skipped"] == ["Row 2: Missing Symbol or Company Name"]
    assert data["errors"] is None

    listing = client.post("/api/stocks/search", json={"symbol": "SBIN"}).get_json()["data"]
    assert listing[0]["companyName"] == "State Bank of India Ltd"
    assert listing[0]["marketCap"] == 730000


def test_import_requires_rows(client):
    response = client.post("/api/stocks/import", json={"data": []})
    assert response.status_code == 400


def test_export_csv(client, stocks):
    response = client.get("/api/stocks/export/csv")
    assert response.mimetype == "text/csv"
    lines = response.get_data(as_text=True).strip().splitlines()
    assert lines[0].startswith("Symbol,Company Name,Macro Economic Classification,Sector")
    assert len(lines) == 4
