from market_dashboard.utils import prepare_calendar_entries, split_purposes


def _row(symbol="TCS", purpose="Financial Results", date="10-Jul-2025", company="Tata Consultancy Services"):
    return {"Symbol": symbol, "Company": company, "Purpose": purpose, "Date": date}


def test_split_purposes():
    assert split_purposes("Financial Results/Dividend") == ["Financial Results", "Dividend"]
    assert split_purposes(" Bonus / ") == ["Bonus"]
    assert split_purposes("") == []


def test_prepare_splits_compound_purpose():
    entries, errors, warnings = prepare_calendar_entries([_row(purpose="Financial Results/Dividend")], set())

    assert errors == []
    assert [e["purpose"] for e in entries] == ["Financial Results", "Dividend"]
    assert all(e["original_purpose"] == "Financial Results/Dividend" for e in entries)
    assert warnings == ['Entry 1: "Financial Results/Dividend" will be split into 2 separate entries']


def test_prepare_rejects_invalid_rows():
    rows = [
        _row(date="2025-07-10"),
        _row(purpose="Annual Picnic"),
        {"Symbol": "INFY", "Company": "Infosys"},
        "not a row",
    ]
    entries, errors, _ = prepare_calendar_entries(rows, set())

    assert entries == []
    assert len(errors) == 4
    assert errors[0].startswith('Entry 1: Invalid date format "2025-07-10"')
    assert errors[1] == 'Entry 2: Invalid purposes in "Annual Picnic": Annual Picnic'
    assert errors[2] == "Entry 3: Missing fields - Purpose, Date"
    assert errors[3] == "Entry 4: Not an object"


def test_prepare_skips_duplicates():
    existing = {("TCS", "10-Jul-2025", "Dividend")}
    rows = [
        _row(purpose="Dividend"),
        _row(symbol="infy", purpose="Bonus"),
        _row(symbol="INFY", purpose="Bonus"),
    ]
    entries, errors, warnings = prepare_calendar_entries(rows, existing)

    assert errors == []
    assert [(e["symbol"], e["purpose"]) for e in entries] == [("INFY", "Bonus")]
    assert len([w for w in warnings if "Duplicate skipped" in w]) == 2
