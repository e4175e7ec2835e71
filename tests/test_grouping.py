"""Tests for the sector roll-up."""

import pytest

from lookthrough.core.aggregation.grouping import aggregate_sectors
from lookthrough.models.exposure import ExposureRecord


def _record(ticker, value, sector=None):
    return ExposureRecord(ticker=ticker, sector=sector, direct_value=value)


def test_sums_by_sector_and_sorts():
    records = [
        _record("AAPL", 500, "Technology"),
        _record("XOM", 300, "Energy"),
        _record("MSFT", 200, "Technology"),
        _record("ZZZ", 100),
    ]

    buckets = aggregate_sectors(records, 2000)

    assert [(b.sector_name, b.market_value) for b in buckets] == [
        ("Technology", 700),
        ("Energy", 300),
        ("Unknown", 100),
    ]
    assert [b.percentage for b in buckets] == pytest.approx([35, 15, 5])


def test_ties_broken_by_sector_name():
    records = [_record("B", 100, "Utilities"), _record("A", 100, "Energy")]

    buckets = aggregate_sectors(records, 200)

    assert [b.sector_name for b in buckets] == ["Energy", "Utilities"]


def test_zero_total_gives_zero_percent():
    buckets = aggregate_sectors([_record("AAPL", 0, "Technology")], 0)

    assert buckets[0].percentage == 0


def test_no_records():
    assert aggregate_sectors([], 1000) == []
