from market_dashboard.utils import rank_volume_imbalance


def _stock(symbol, side, percent):
    return {
        "symbol": symbol,
        "lastPrice": 100,
        "pChange": 1.0,
        "spreadAnalysis": {
            "volumeDominantSide": side,
            "volumeImbalancePercent": percent,
            "totalBidVolume": 1000,
            "totalAskVolume": 400,
        },
    }


def test_rank_volume_imbalance_partitions_and_sorts():
    securities = [
        _stock("A", "BID", 20),
        _stock("B", "BID", 65),
        _stock("C", "ASK", 55),
        _stock("D", "ASK", 10),
        _stock("E", "NEUTRAL", 90),
        _stock("F", "BID", None),
        {"symbol": "G", "pChange": 2.0},
    ]

    result = rank_volume_imbalance(securities)

    assert [e["symbol"] for e in result["bidDominantStocks"]] == ["B", "A"]
    assert [e["symbol"] for e in result["askDominantStocks"]] == ["C", "D"]
    assert result["summary"] == {
        "totalBidDominant": 2,
        "totalAskDominant": 2,
        "strongBidImbalance": 1,
        "strongAskImbalance": 1,
    }
    entry = result["bidDominantStocks"][0]
    assert entry["bidAskVolumeRatioText"] == "N/A"
    assert entry["totalBidVolume"] == 1000
    assert entry["spreadPercent"] == 0


def test_rank_volume_imbalance_strong_threshold_is_strict():
    result = rank_volume_imbalance([_stock("A", "BID", 50), _stock("B", "BID", 50.01)])
    assert result["summary"]["strongBidImbalance"] == 1


def test_rank_volume_imbalance_truncates_lists_not_counts():
    securities = [_stock(f"S{i}", "ASK", i) for i in range(15)]
    result = rank_volume_imbalance(securities, top_n=10)

    assert result["summary"]["totalAskDominant"] == 15
    assert len(result["askDominantStocks"]) == 10
    assert result["askDominantStocks"][0]["symbol"] == "S14"
