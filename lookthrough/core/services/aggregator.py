# core/services/aggregator.py
"""
Aggregator Service - Accumulates direct and look-through value per ticker.

UI-agnostic. Holdings are processed in the order given, which fixes the
order of each record's sources and which sector wins when two sources
disagree. Totals do not depend on that order.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from lookthrough.core.errors import PipelineError
from lookthrough.data.catalogs import Catalogs
from lookthrough.models.catalog import CompanyOverview, ETFProfile
from lookthrough.models.exposure import DirectHolding, ExposureRecord, ExposureSource
from lookthrough.models.holdings import Holding
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


class ExposureAggregator:
    """Builds one ExposureRecord per underlying ticker."""

    def __init__(self, catalogs: Optional[Catalogs] = None):
        self.catalogs = catalogs

    def aggregate(
        self,
        direct_stocks: Sequence[Holding],
        etf_holdings: Sequence[Holding],
        profiles: Dict[str, ETFProfile],
        overviews: Dict[str, CompanyOverview],
    ) -> Tuple[Dict[str, ExposureRecord], List[PipelineError]]:
        """
        Aggregate direct and ETF positions into exposure records.

        Args:
            direct_stocks: Stock holdings, in caller order
            etf_holdings: Real ETF holdings followed by synthetic ones
            profiles: Resolved constituent profiles by ETF symbol
            overviews: Resolved sector data by ticker

        Returns:
            Tuple of (records, errors)
            - records: ticker -> ExposureRecord, in first-seen order
            - errors: always empty today; missing data degrades to zero
        """
        records: Dict[str, ExposureRecord] = {}
        errors: List[PipelineError] = []

        for holding in direct_stocks:
            self._add_direct(records, holding, overviews.get(holding.ticker))

        skipped = 0
        for holding in etf_holdings:
            profile = profiles.get(holding.ticker)
            if profile is None:
                skipped += 1
                continue
            self._add_etf(records, holding, profile, overviews)

        if skipped:
            logger.info(f"{skipped} ETF positions had no constituent data and were skipped")

        logger.info(
            f"Aggregation complete: {len(records)} unique exposures from "
            f"{len(direct_stocks)} direct and {len(etf_holdings)} ETF positions"
        )
        return records, errors

    def _add_direct(
        self,
        records: Dict[str, ExposureRecord],
        holding: Holding,
        overview: Optional[CompanyOverview],
    ) -> None:
        ticker = holding.ticker
        record = records.get(ticker)
        if record is None:
            if holding.is_manual_entry and holding.name:
                name = holding.name
            else:
                name = (overview.name if overview else None) or holding.name or ticker
            record = ExposureRecord(ticker=ticker, name=name)
            records[ticker] = record

        # Manual entries carry user-supplied classification that wins over lookups
        if holding.is_manual_entry:
            record.classify(holding.sector, holding.industry)
        if overview is not None:
            record.classify(overview.sector, overview.industry)

        record.add_direct(
            DirectHolding(
                holding_id=holding.id,
                account_id=holding.account_id,
                account_name=holding.account_name,
                market_value=holding.market_value,
            )
        )

    def _add_etf(
        self,
        records: Dict[str, ExposureRecord],
        holding: Holding,
        profile: ETFProfile,
        overviews: Dict[str, CompanyOverview],
    ) -> None:
        origin_symbol, origin_name = self._origin_label(holding, profile)
        logger.debug(
            f"Decomposing {holding.ticker} ({len(profile.constituents)} constituents, "
            f"${holding.market_value:,.2f})"
        )

        for constituent in profile.constituents:
            contribution = holding.market_value * constituent.weight_percent / 100
            overview = overviews.get(constituent.symbol)

            record = records.get(constituent.symbol)
            if record is None:
                name = constituent.name or (overview.name if overview else None)
                record = ExposureRecord(
                    ticker=constituent.symbol, name=name or constituent.symbol
                )
                records[constituent.symbol] = record

            record.classify(constituent.sector, None)
            if overview is not None:
                record.classify(overview.sector, overview.industry)

            record.add_indirect(
                ExposureSource(
                    origin_symbol=origin_symbol,
                    origin_name=origin_name,
                    percent_of_origin=constituent.weight_percent,
                    value_via_origin=contribution,
                    account_id=holding.account_id,
                    account_name=holding.account_name,
                    via_etf=holding.ticker if holding.is_synthetic else None,
                )
            )

    def _origin_label(self, holding: Holding, profile: ETFProfile) -> Tuple[str, str]:
        """Synthetic holdings report the originating mutual fund, not the proxy ETF."""
        if not holding.is_synthetic:
            return holding.ticker, profile.name or holding.name or holding.ticker

        fund_name = holding.origin_fund
        if self.catalogs is not None:
            entry = self.catalogs.mutual_fund(holding.origin_fund)
            if entry is not None and entry.name:
                fund_name = entry.name
        return holding.origin_fund, f"{fund_name} → {holding.ticker}"
