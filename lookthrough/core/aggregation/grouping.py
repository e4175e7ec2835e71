"""Sector roll-up of finalized exposure records."""

from typing import List, Sequence

import pandas as pd

from lookthrough import config
from lookthrough.models.breakdown import SectorBucket
from lookthrough.models.exposure import ExposureRecord
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


def aggregate_sectors(
    records: Sequence[ExposureRecord], total_portfolio_value: float
) -> List[SectorBucket]:
    """
    Sum look-through exposure value by sector.

    This is exposure value, not raw holding value, so the buckets do not
    add up to the portfolio total when ETFs list only top holdings.

    Args:
        records: Finalized exposure records
        total_portfolio_value: Denominator for the percentage column

    Returns:
        SectorBucket list sorted by value descending, ties by sector name
    """
    if not records:
        return []

    df = pd.DataFrame(
        {
            "sector": [r.sector or config.UNKNOWN_SECTOR for r in records],
            "value": [r.total_value for r in records],
        }
    )

    grouped = df.groupby("sector", as_index=False)["value"].sum()
    if total_portfolio_value > 0:
        grouped["percentage"] = grouped["value"] / total_portfolio_value * 100
    else:
        grouped["percentage"] = 0.0

    grouped = grouped.sort_values(["value", "sector"], ascending=[False, True])

    unknown = grouped.loc[grouped["sector"] == config.UNKNOWN_SECTOR, "value"].sum()
    if unknown > 0:
        logger.info(f"${unknown:,.2f} of exposure has no sector data")

    return [
        SectorBucket(
            sector_name=row.sector,
            market_value=float(row.value),
            percentage=float(row.percentage),
        )
        for row in grouped.itertuples(index=False)
    ]
