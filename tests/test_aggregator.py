"""Tests for the exposure aggregator."""

import pytest

from lookthrough.core.services.aggregator import ExposureAggregator
from lookthrough.models.catalog import CompanyOverview, ETFConstituent, ETFProfile

from factories import fund, make_holding, stock


def _profiles(catalogs, *symbols):
    return {s: catalogs.etf_profile(s) for s in symbols}


def test_direct_holdings_sum_across_accounts(small_catalogs):
    holdings = [
        stock("AAPL", 600, account_id="a1"),
        stock("AAPL", 400, account_id="a2"),
    ]

    records, errors = ExposureAggregator(small_catalogs).aggregate(holdings, [], {}, {})

    aapl = records["AAPL"]
    assert aapl.direct_value == 1000
    assert aapl.etf_value == 0
    assert aapl.total_value == 1000
    assert [d.account_id for d in aapl.direct_holdings] == ["a1", "a2"]
    assert errors == []


def test_etf_split_by_constituent_weight(small_catalogs):
    records, _ = ExposureAggregator(small_catalogs).aggregate(
        [], [fund("ABC", 1000)], _profiles(small_catalogs, "ABC"), {}
    )

    assert records["AAA"].etf_value == pytest.approx(600)
    assert records["BBB"].etf_value == pytest.approx(400)
    assert records["AAA"].direct_value == 0
    assert set(records) == {"AAA", "BBB"}


def test_direct_and_indirect_combine(small_catalogs):
    records, _ = ExposureAggregator(small_catalogs).aggregate(
        [stock("AAPL", 1000)], [fund("XYZ", 1000)], _profiles(small_catalogs, "XYZ"), {}
    )

    aapl = records["AAPL"]
    assert aapl.direct_value == 1000
    assert aapl.etf_value == pytest.approx(500)
    assert aapl.total_value == pytest.approx(1500)

    source = aapl.sources[0]
    assert source.origin_symbol == "XYZ"
    assert source.origin_name == "XYZ Growth ETF"
    assert source.percent_of_origin == 50
    assert source.via_etf is None


def test_synthetic_holding_reports_mutual_fund(small_catalogs):
    synthetic = fund(
        "XYZ", 500, id="mf-XYZ", origin_fund="HALF", name="XYZ (via HALF)", account_name="IRA"
    )

    records, _ = ExposureAggregator(small_catalogs).aggregate(
        [], [synthetic], _profiles(small_catalogs, "XYZ"), {}
    )

    source = records["MSFT"].sources[0]
    assert source.origin_symbol == "HALF"
    assert source.origin_name == "Half Mapped Fund → XYZ"
    assert source.via_etf == "XYZ"
    assert source.account_name == "IRA"
    assert source.value_via_origin == pytest.approx(150)


def test_sector_from_constituent_then_overview(small_catalogs):
    overviews = {
        "AAA": CompanyOverview(symbol="AAA", sector="Utilities", industry="Utilities - Regulated"),
        "BBB": CompanyOverview(symbol="BBB", sector="Industrials", industry="Oil & Gas Equipment"),
    }

    records, _ = ExposureAggregator(small_catalogs).aggregate(
        [], [fund("ABC", 100)], _profiles(small_catalogs, "ABC"), overviews
    )

    assert records["AAA"].sector == "Utilities"
    # Constituent sector is written first and wins; industry still fills in
    assert records["BBB"].sector == "Energy"
    assert records["BBB"].industry == "Oil & Gas Equipment"


def test_sector_tie_break_follows_input_order(small_catalogs):
    profiles = {
        "E1": ETFProfile(
            symbol="E1", constituents=[ETFConstituent(symbol="X", weight_percent=10, sector="Alpha")]
        ),
        "E2": ETFProfile(
            symbol="E2", constituents=[ETFConstituent(symbol="X", weight_percent=10, sector="Beta")]
        ),
    }
    aggregator = ExposureAggregator(small_catalogs)
    e1, e2 = fund("E1", 100), fund("E2", 300)

    forward, _ = aggregator.aggregate([], [e1, e2], profiles, {})
    backward, _ = aggregator.aggregate([], [e2, e1], profiles, {})

    assert forward["X"].sector == "Alpha"
    assert backward["X"].sector == "Beta"
    assert forward["X"].total_value == pytest.approx(backward["X"].total_value)
    assert [s.origin_symbol for s in forward["X"].sources] == ["E1", "E2"]


def test_manual_entry_keeps_user_fields(small_catalogs):
    manual = make_holding(
        ticker="AAPL",
        name="My Apple Shares",
        market_value=100,
        is_manual_entry=True,
        sector="Custom Sector",
        industry="Custom Industry",
    )
    overviews = {"AAPL": CompanyOverview(symbol="AAPL", name="Apple Inc", sector="Technology")}

    records, _ = ExposureAggregator(small_catalogs).aggregate([manual], [], {}, overviews)

    assert records["AAPL"].name == "My Apple Shares"
    assert records["AAPL"].sector == "Custom Sector"
    assert records["AAPL"].industry == "Custom Industry"


def test_direct_name_prefers_overview(small_catalogs):
    overviews = {"AAPL": CompanyOverview(symbol="AAPL", name="Apple Inc", sector="Technology")}

    records, _ = ExposureAggregator(small_catalogs).aggregate(
        [stock("AAPL", 10, name="APPLE INC COM")], [], {}, overviews
    )

    assert records["AAPL"].name == "Apple Inc"
    assert records["AAPL"].sector == "Technology"


def test_unresolved_etf_contributes_nothing(small_catalogs):
    records, errors = ExposureAggregator(small_catalogs).aggregate(
        [], [fund("UNKNOWN", 1000)], {}, {}
    )

    assert records == {}
    assert errors == []
