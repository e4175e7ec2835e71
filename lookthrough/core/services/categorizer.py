# core/services/categorizer.py
"""
Categorizer Service - Splits raw holdings into resolution buckets.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from lookthrough.core.errors import ErrorPhase, ErrorType, PipelineError
from lookthrough.data.catalogs import Catalogs
from lookthrough.models.holdings import Holding, HoldingType
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class CategorizedHoldings:
    """Holdings split by how their exposure gets resolved. Input order is kept."""

    direct_stocks: List[Holding] = field(default_factory=list)
    etfs: List[Holding] = field(default_factory=list)
    mutual_funds: List[Holding] = field(default_factory=list)
    cash: List[Holding] = field(default_factory=list)

    @property
    def counts(self) -> dict:
        return {
            "stocks": len(self.direct_stocks),
            "etfs": len(self.etfs),
            "mutual_funds": len(self.mutual_funds),
            "cash": len(self.cash),
        }


class Categorizer:
    """Routes each holding to the direct, ETF, mutual-fund or cash bucket."""

    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    def categorize(
        self, holdings: Sequence[Holding]
    ) -> Tuple[CategorizedHoldings, List[PipelineError]]:
        """
        Categorize holdings.

        Stocks go to the direct bucket. Funds listed in the mutual-fund
        catalog go to the mutual-fund bucket; every other fund is treated as
        an ETF and left for the constituent resolver to look up. Cash never
        takes part in look-through resolution.

        Returns:
            Tuple of (categorized, errors)
        """
        result = CategorizedHoldings()
        errors: List[PipelineError] = []

        for holding in holdings:
            if holding.type == HoldingType.CASH:
                result.cash.append(holding)
                continue

            if not holding.ticker:
                logger.warning(
                    f"Holding {holding.id} ({holding.type.value}) has no ticker; "
                    f"excluded from look-through"
                )
                errors.append(
                    PipelineError(
                        phase=ErrorPhase.CATEGORIZATION,
                        error_type=ErrorType.VALIDATION_FAILED,
                        item=holding.id,
                        message=f"{holding.type.value} holding without ticker",
                        fix_hint="Add a ticker to include it in exposure analysis",
                    )
                )
                continue

            if holding.type == HoldingType.STOCK:
                result.direct_stocks.append(holding)
            elif self.catalogs.is_mutual_fund(holding.ticker):
                result.mutual_funds.append(holding)
            else:
                result.etfs.append(holding)

        counts = result.counts
        logger.info(
            f"Holdings breakdown - ETFs: {counts['etfs']}, "
            f"Mutual Funds: {counts['mutual_funds']}, "
            f"Stocks: {counts['stocks']}, Cash: {counts['cash']}"
        )
        return result, errors
