"""Command Handlers.

Each handler takes (cmd_id, payload) and returns a response dict. Holdings
arrive as JSON objects using the display layer's camelCase keys
(accountId, marketValue, ...).

Handler Naming Convention:
    - Handlers are named `handle_{command_name}`
    - All handlers return `dict[str, Any]` matching the response contract
"""

from typing import Any, Callable, Optional

from pydantic import ValidationError

from lookthrough.core.insights import check_concentration_risk, top_exposures
from lookthrough.headless.responses import error_response, success_response
from lookthrough.headless.state import get_engine
from lookthrough.models.holdings import Holding
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


class InvalidParams(ValueError):
    """Raised by payload parsing; turned into an INVALID_PARAMS response."""


def _parse_holdings(payload: dict[str, Any]) -> list[Holding]:
    raw = payload.get("holdings")
    if not isinstance(raw, list):
        raise InvalidParams("payload.holdings must be a list")

    holdings = []
    for index, item in enumerate(raw):
        try:
            holdings.append(Holding.model_validate(item))
        except ValidationError as e:
            first = e.errors()[0]
            location = "".join(f".{part}" for part in first.get("loc", ()))
            raise InvalidParams(f"holdings[{index}]{location}: {first.get('msg')}") from e
    return holdings


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value.strip():
        raise InvalidParams(f"payload.{key} must be a non-empty string")
    return value.strip()


def _invalid(cmd_id: Any, e: InvalidParams) -> dict[str, Any]:
    logger.warning(f"Invalid params for request {cmd_id}: {e}")
    return error_response(cmd_id, "INVALID_PARAMS", str(e))


def handle_calculate_exposures(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Run the full look-through calculation.

    Args:
        payload: 'holdings' list, optional 'accountId' to restrict to one account.

    Returns:
        Success response with the serialized ExposureResult.
    """
    try:
        holdings = _parse_holdings(payload)
        account_id: Optional[str] = None
        if payload.get("accountId") is not None:
            account_id = _require_str(payload, "accountId")
    except InvalidParams as e:
        return _invalid(cmd_id, e)

    engine = get_engine()
    if account_id is not None:
        result = engine.exposures_by_account(holdings, account_id)
    else:
        result = engine.calculate(holdings)
    return success_response(cmd_id, result.to_dict())


def handle_get_asset_class_breakdown(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Asset-class breakdown only (no look-through resolution)."""
    try:
        holdings = _parse_holdings(payload)
    except InvalidParams as e:
        return _invalid(cmd_id, e)

    buckets = get_engine().asset_class_breakdown(holdings)
    return success_response(
        cmd_id,
        {
            "totalPortfolioValue": sum(h.market_value for h in holdings),
            "assetClassBreakdown": [b.model_dump(mode="json", by_alias=True) for b in buckets],
        },
    )


def handle_get_top_exposures(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Largest exposures; payload 'holdings' and optional 'limit' (default 10)."""
    limit = payload.get("limit", 10)
    try:
        holdings = _parse_holdings(payload)
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise InvalidParams("payload.limit must be a non-negative integer")
    except InvalidParams as e:
        return _invalid(cmd_id, e)

    result = get_engine().calculate(holdings)
    records = top_exposures(result, limit)
    return success_response(
        cmd_id,
        {
            "totalPortfolioValue": result.total_portfolio_value,
            "exposureRecords": [
                r.model_dump(mode="json", by_alias=True, exclude={"direct_holdings", "sub_rows"})
                for r in records
            ],
        },
    )


def handle_check_concentration_risk(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Would buying 'additionalValue' of 'ticker' concentrate the portfolio?"""
    try:
        holdings = _parse_holdings(payload)
        ticker = _require_str(payload, "ticker")
        additional = payload.get("additionalValue")
        if isinstance(additional, bool) or not isinstance(additional, (int, float)):
            raise InvalidParams("payload.additionalValue must be a number")
    except InvalidParams as e:
        return _invalid(cmd_id, e)

    result = get_engine().calculate(holdings)
    risk = check_concentration_risk(result, ticker, float(additional))
    return success_response(
        cmd_id,
        {
            "ticker": ticker.upper(),
            "wouldExceed10Percent": risk["would_exceed_10_percent"],
            "wouldExceed20Percent": risk["would_exceed_20_percent"],
            "newPercentage": risk["new_percentage"],
            "currentPercentage": risk["current_percentage"],
        },
    )


def handle_clear_caches(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Clear both resolver caches."""
    removed = get_engine().clear_caches()
    return success_response(cmd_id, {"removed": removed})


def handle_get_cache_stats(cmd_id: Any, payload: dict[str, Any]) -> dict[str, Any]:
    """Entry and hit counts for both resolver caches, plus the catalog version."""
    engine = get_engine()
    return success_response(
        cmd_id,
        {
            "catalogVersion": engine.catalogs.version,
            "caches": engine.cache_stats(),
        },
    )


HandlerFunc = Callable[[Any, dict[str, Any]], dict[str, Any]]

HANDLER_REGISTRY: dict[str, HandlerFunc] = {
    # Calculation
    "calculate_exposures": handle_calculate_exposures,
    "get_asset_class_breakdown": handle_get_asset_class_breakdown,
    # Insights
    "get_top_exposures": handle_get_top_exposures,
    "check_concentration_risk": handle_check_concentration_risk,
    # Cache control
    "clear_caches": handle_clear_caches,
    "get_cache_stats": handle_get_cache_stats,
}
