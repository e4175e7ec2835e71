"""Holding factories for tests."""

import itertools

from lookthrough.models.holdings import Holding, HoldingType

_ids = itertools.count(1)


def make_holding(**overrides) -> Holding:
    fields = {
        "id": f"h-{next(_ids)}",
        "account_id": "acc-1",
        "account_name": "Brokerage",
        "ticker": "AAPL",
        "name": "",
        "quantity": 1.0,
        "last_price": 0.0,
        "market_value": 1000.0,
        "type": HoldingType.STOCK,
    }
    fields.update(overrides)
    return Holding(**fields)


def stock(ticker: str, value: float, **overrides) -> Holding:
    return make_holding(ticker=ticker, market_value=value, type=HoldingType.STOCK, **overrides)


def fund(ticker: str, value: float, **overrides) -> Holding:
    """ETF or mutual fund; the catalogs decide which."""
    return make_holding(ticker=ticker, market_value=value, type=HoldingType.FUND, **overrides)


def cash(value: float, **overrides) -> Holding:
    return make_holding(ticker=None, name="Cash", market_value=value, type=HoldingType.CASH, **overrides)
