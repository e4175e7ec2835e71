# core/services/translator.py
"""
Translator Service - Converts mutual-fund positions into synthetic ETF positions.
"""

from typing import List, Sequence, Tuple

from lookthrough.core.errors import ErrorPhase, ErrorType, PipelineError
from lookthrough.data.catalogs import Catalogs
from lookthrough.models.holdings import Holding, HoldingType
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)

# Mapping totals within this distance of 100% are treated as complete
MAPPING_TOLERANCE = 0.01


class MutualFundTranslator:
    """Replaces each mutual fund with one virtual ETF holding per mapping row."""

    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    def translate(
        self, fund_holdings: Sequence[Holding]
    ) -> Tuple[List[Holding], List[PipelineError]]:
        """
        Translate mutual-fund holdings into synthetic ETF holdings.

        Each mapping row yields a holding worth
        fund.market_value * percentage / 100. Mappings that do not add up
        to 100% are passed through as-is and reported as a warning.

        Args:
            fund_holdings: Holdings whose ticker is in the mutual-fund catalog

        Returns:
            Tuple of (synthetic_holdings, errors), in mapping order per fund
        """
        synthetic: List[Holding] = []
        errors: List[PipelineError] = []

        for fund in fund_holdings:
            entry = self.catalogs.mutual_fund(fund.ticker or "")
            if entry is None:
                errors.append(
                    PipelineError(
                        phase=ErrorPhase.TRANSLATION,
                        error_type=ErrorType.MISSING_CATALOG_ENTRY,
                        item=fund.ticker or fund.id,
                        message="Mutual fund has no mapping entry",
                    )
                )
                continue

            logger.debug(
                f"Converting mutual fund {fund.ticker} ({entry.name}) to ETF equivalents"
            )

            if abs(entry.total_percentage - 100.0) > MAPPING_TOLERANCE:
                logger.warning(
                    f"Mappings for {entry.symbol} sum to {entry.total_percentage:.2f}%; "
                    f"using them as-is"
                )
                errors.append(
                    PipelineError(
                        phase=ErrorPhase.TRANSLATION,
                        error_type=ErrorType.MALFORMED_MAPPING,
                        item=entry.symbol,
                        message=(
                            f"Mapping percentages sum to {entry.total_percentage:.2f}%"
                        ),
                        fix_hint="Known approximation; adjust the catalog if needed",
                    )
                )

            for mapping in entry.mappings:
                value = fund.market_value * (mapping.percentage / 100)
                synthetic.append(
                    Holding(
                        id=f"{fund.id}-{mapping.etf_symbol}",
                        account_id=fund.account_id,
                        account_name=fund.account_name,
                        ticker=mapping.etf_symbol,
                        name=f"{mapping.etf_symbol} (via {entry.symbol})",
                        quantity=0.0,
                        last_price=0.0,
                        market_value=value,
                        type=HoldingType.FUND,
                        origin_fund=entry.symbol,
                        mapping_notes=mapping.notes,
                    )
                )
                logger.debug(
                    f"  - {mapping.percentage}% -> {mapping.etf_symbol}: ${value:,.2f}"
                )

        return synthetic, errors
