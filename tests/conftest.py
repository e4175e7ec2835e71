"""
Shared fixtures for the exposure engine tests.

Network collaborators are always MagicMocks; no test talks to a real proxy.
"""

from unittest.mock import MagicMock

import pytest

from lookthrough import config
from lookthrough.core.pipeline import ExposureEngine
from lookthrough.data.catalogs import Catalogs, load_catalogs
from lookthrough.data.proxy_client import ProxyClient, ProxyResponse
from lookthrough.headless.state import reset_state


# === Catalog data ===

SMALL_ETF_CONSTITUENTS = {
    "_version": "test-1",
    "XYZ": {
        "name": "XYZ Growth ETF",
        "constituents": [
            {"symbol": "AAPL", "name": "Apple Inc", "weightPercent": 50, "sector": "Technology"},
            {"symbol": "MSFT", "name": "Microsoft Corp", "weightPercent": 30, "sector": "Technology"},
        ],
    },
    "ABC": {
        "name": "ABC Value ETF",
        "constituents": [
            {"symbol": "AAA", "name": "Alpha Utilities", "weightPercent": 60},
            {"symbol": "BBB", "name": "Beta Energy", "weightPercent": 40, "sector": "Energy"},
        ],
    },
}

SMALL_MUTUAL_FUNDS = {
    "HALF": {
        "name": "Half Mapped Fund",
        "mappings": [{"etf": "XYZ", "percentage": 50, "notes": "partial proxy"}],
    },
    "OVER": {
        "name": "Over Mapped Fund",
        "mappings": [
            {"etf": "XYZ", "percentage": 80, "notes": "growth sleeve"},
            {"etf": "ABC", "percentage": 40, "notes": "value sleeve"},
        ],
    },
}

SMALL_ASSET_CLASSIFICATIONS = {
    "assetClasses": {
        "us_equity": {"name": "U.S. Stocks", "color": "#3b82f6"},
        "intl_equity": {"name": "Non-U.S. Stocks", "color": "#06b6d4"},
        "fixed_income": {"name": "Fixed Income", "color": "#f59e0b"},
        "cash": {"name": "Cash", "color": "#10b981"},
    },
    "stocks": {
        "AAPL": {
            "class": "us_equity",
            "name": "Apple Inc",
            "sector": "Technology",
            "industry": "Consumer Electronics",
        },
        "AAA": {"class": "us_equity", "sector": "Utilities", "industry": "Utilities - Regulated"},
        "SAP": {"class": "intl_equity", "name": "SAP SE", "sector": "Technology"},
        "BTC": {"class": "crypto"},
    },
    "etfs": {
        "XYZ": {
            "breakdown": [
                {"class": "us_equity", "percentage": 70},
                {"class": "intl_equity", "percentage": 30},
            ]
        },
    },
}


# === Fixtures ===


@pytest.fixture(scope="session")
def default_catalogs() -> Catalogs:
    """The catalog set bundled with the package."""
    return load_catalogs(config.DEFAULT_CATALOG_DIR)


@pytest.fixture
def small_catalogs() -> Catalogs:
    """A compact catalog with round numbers for hand-checked arithmetic."""
    return Catalogs.from_dicts(
        etf_constituents=SMALL_ETF_CONSTITUENTS,
        mutual_fund_mappings=SMALL_MUTUAL_FUNDS,
        asset_classifications=SMALL_ASSET_CLASSIFICATIONS,
    )


@pytest.fixture
def engine(default_catalogs) -> ExposureEngine:
    return ExposureEngine(default_catalogs)


@pytest.fixture
def small_engine(small_catalogs) -> ExposureEngine:
    return ExposureEngine(small_catalogs)


@pytest.fixture
def mock_proxy() -> MagicMock:
    """Proxy client that answers every batch call with an empty result."""
    proxy = MagicMock(spec=ProxyClient)
    proxy.fetch_etf_holdings.return_value = ProxyResponse(success=True, data={})
    proxy.fetch_company_overviews.return_value = ProxyResponse(success=True, data={})
    return proxy


@pytest.fixture(autouse=True)
def clean_headless_state():
    reset_state()
    yield
    reset_state()
