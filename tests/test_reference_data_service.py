import json

from market_dashboard.services import ReferenceDataService, build_reference_data, load_reference_data


def _write(path, payload):
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
    return str(path)


def test_load_reference_data_coerces_market_caps(tmp_path):
    sectors = _write(tmp_path / "sectors.json", {"data": [
        {"name": "IT", "stocks": [
            {"symbol": "tcs", "marketCap": "1,400,000"},
            {"symbol": "INFY", "marketCap": "NaN"},
            {"companyName": "no symbol"},
        ]},
        {"name": "", "stocks": []},
    ]})

    reference = load_reference_data(sectors, str(tmp_path / "missing.json"))

    (it, ) = reference.sectors
    assert it.symbols == ["TCS", "INFY"]
    assert [s.market_cap for s in it.stocks] == [1400000.0, 0]
    assert it.total_market_cap == 1400000.0
    assert reference.industries == ()


def test_corrupt_reference_file_loads_empty_at_startup(tmp_path):
    sectors = _write(tmp_path / "sectors.json", "{not json")
    industries = _write(tmp_path / "industries.json", [{"name": "Banks", "stocks": [{"symbol": "SBIN"}]}])

    service = ReferenceDataService(sectors, industries)

    assert service.current.sectors == ()
    assert [g.name for g in service.current.industries] == ["Banks"]


def test_reference_document_must_be_a_list(tmp_path):
    sectors = _write(tmp_path / "sectors.json", "42")
    assert load_reference_data(sectors, None).is_empty


def test_build_reference_data_groups_by_market_cap():
    reference = build_reference_data([
        {"symbol": "SBIN", "sector": "Financials", "industry": "Banks", "marketCap": "7,25,000"},
        {"symbol": "HDFCBANK", "sector": "Financials", "industry": "Banks", "marketCap": 1270000},
        {"symbol": "TCS", "sector": "IT", "industry": ""},
        {"sector": "IT"},
    ])

    assert [g.name for g in reference.sectors] == ["Financials", "IT"]
    assert reference.sectors[0].symbols == ["HDFCBANK", "SBIN"]
    assert [g.name for g in reference.industries] == ["Banks"]
    assert reference.source == "stock-master"
