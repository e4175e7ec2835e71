"""Percentages, drill-down rows and final ordering of exposure records."""

import math
from typing import Iterable, List, Optional, Tuple

from lookthrough.core.errors import (
    ContractViolation,
    ErrorPhase,
    ErrorType,
    PipelineError,
)
from lookthrough.models.exposure import ExposureRecord, ExposureSubRow
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


def _percent(value: float, total: float) -> float:
    return value / total * 100 if total > 0 else 0.0


def build_sub_rows(record: ExposureRecord, total_portfolio_value: float) -> List[ExposureSubRow]:
    """
    Drill-down rows for one record.

    One row per direct holding (only when the ticker is held directly),
    followed by one row per contributing wrapper.
    """
    rows = []

    if record.direct_value > 0:
        for index, direct in enumerate(record.direct_holdings):
            rows.append(
                ExposureSubRow(
                    id=f"{record.id}-direct-{index}",
                    ticker=record.ticker,
                    name="Direct holding",
                    direct_value=direct.market_value,
                    total_value=direct.market_value,
                    percent_of_portfolio=_percent(direct.market_value, total_portfolio_value),
                    account_id=direct.account_id,
                    account_name=direct.account_name,
                    is_direct=True,
                )
            )

    for index, source in enumerate(record.sources):
        rows.append(
            ExposureSubRow(
                id=f"{record.id}-etf-{index}",
                ticker=source.origin_symbol,
                name=source.origin_name,
                etf_value=source.value_via_origin,
                total_value=source.value_via_origin,
                percent_of_portfolio=_percent(source.value_via_origin, total_portfolio_value),
                account_id=source.account_id,
                account_name=source.account_name,
            )
        )

    return rows


def finalize_exposures(
    records: Iterable[ExposureRecord], total_portfolio_value: Optional[float]
) -> Tuple[List[ExposureRecord], List[PipelineError]]:
    """
    Set percent_of_portfolio and sub-rows, then sort.

    Args:
        records: Aggregated exposure records (modified in place)
        total_portfolio_value: Sum of all holding values, cash included

    Returns:
        Tuple of (records sorted by total_value descending then ticker, errors)

    Raises:
        ContractViolation: If the total is missing or not finite
    """
    if total_portfolio_value is None:
        raise ContractViolation("finalize_exposures requires a total portfolio value")
    if math.isnan(total_portfolio_value) or math.isinf(total_portfolio_value):
        raise ContractViolation(f"Total portfolio value must be finite, got {total_portfolio_value}")

    records = list(records)
    errors: List[PipelineError] = []

    if total_portfolio_value <= 0 and records:
        logger.warning(
            f"Total portfolio value is {total_portfolio_value:,.2f}; all percentages set to 0"
        )
        errors.append(
            PipelineError(
                phase=ErrorPhase.FINALIZATION,
                error_type=ErrorType.DIVIDE_BY_ZERO_GUARD,
                item="total_portfolio_value",
                message=f"Total portfolio value is {total_portfolio_value}; percentages reported as 0",
            )
        )

    for record in records:
        record.percent_of_portfolio = _percent(record.total_value, total_portfolio_value)
        record.sub_rows = build_sub_rows(record, total_portfolio_value)

    records.sort(key=lambda r: (-r.total_value, r.ticker))
    return records, errors
