"""Tests for the sector resolver."""

from unittest.mock import MagicMock

import pytest

from lookthrough.core.errors import ErrorPhase, ErrorType
from lookthrough.core.services.enricher import SectorResolver
from lookthrough.data.caching import ResolverCache
from lookthrough.data.proxy_client import ProxyResponse


@pytest.fixture
def cache():
    return ResolverCache("sectors")


def test_catalog_lookup(default_catalogs, cache):
    overviews, errors = SectorResolver(default_catalogs, cache).resolve(["AAPL", "aapl"])

    assert list(overviews) == ["AAPL"]
    assert overviews["AAPL"].sector == "Technology"
    assert overviews["AAPL"].industry == "Consumer Electronics"
    assert errors == []
    assert "AAPL" in cache


def test_catalog_entry_without_sector_is_a_miss(small_catalogs, cache):
    overviews, _ = SectorResolver(small_catalogs, cache).resolve(["BTC"])

    assert overviews == {}


def test_offline_misses_stay_unknown(default_catalogs, cache):
    overviews, errors = SectorResolver(default_catalogs, cache).resolve(["ZZZ"])

    assert overviews == {}
    assert errors == []


def test_network_fills_misses(default_catalogs, cache, mock_proxy):
    mock_proxy.fetch_company_overviews.return_value = ProxyResponse(
        success=True,
        data={
            "zzz": {"name": "Zed Corp", "sector": "Energy", "industry": "Oil & Gas"},
            "YYY": {"name": "Why Inc", "sector": "Unknown"},
        },
    )

    overviews, errors = SectorResolver(default_catalogs, cache, mock_proxy).resolve(
        ["AAPL", "ZZZ", "YYY"]
    )

    mock_proxy.fetch_company_overviews.assert_called_once_with(["ZZZ", "YYY"])
    assert overviews["ZZZ"].sector == "Energy"
    assert overviews["ZZZ"].source == "network"
    assert "YYY" not in overviews
    assert "ZZZ" in cache
    assert "YYY" not in cache
    assert errors == []


def test_network_failure_is_soft(default_catalogs, cache, mock_proxy):
    mock_proxy.fetch_company_overviews.return_value = ProxyResponse(
        success=False, data=None, error="Connection error", status_code=0
    )

    overviews, errors = SectorResolver(default_catalogs, cache, mock_proxy).resolve(
        ["AAPL", "ZZZ"]
    )

    assert list(overviews) == ["AAPL"]
    assert len(errors) == 1
    assert errors[0].phase == ErrorPhase.SECTOR_RESOLUTION
    assert errors[0].error_type == ErrorType.NETWORK_FAILURE


def test_client_exception_is_contained(default_catalogs, cache):
    proxy = MagicMock()
    proxy.fetch_company_overviews.side_effect = ValueError("bad")

    overviews, errors = SectorResolver(default_catalogs, cache, proxy).resolve(["ZZZ"])

    assert overviews == {}
    assert errors[0].error_type == ErrorType.NETWORK_FAILURE


def test_duplicate_symbols_fetched_once(default_catalogs, cache, mock_proxy):
    SectorResolver(default_catalogs, cache, mock_proxy).resolve(["zzz", "AAPL", "ZZZ", " zzz ", "aapl"])

    mock_proxy.fetch_company_overviews.assert_called_once_with(["ZZZ"])
