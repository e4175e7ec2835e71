# core/pipeline.py
"""
Exposure Engine Orchestrator.

Thin coordinator that:
- Calls services in order
- Emits progress via callback
- Collects errors into List[PipelineError]
- Times each phase

Contains NO business logic; that lives in the services and aggregation
modules. The only state kept between runs is the two resolver caches.
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from lookthrough.core.aggregation import (
    AssetClassifier,
    aggregate_sectors,
    finalize_exposures,
)
from lookthrough.core.errors import PipelineError
from lookthrough.core.services import (
    Categorizer,
    ConstituentResolver,
    ExposureAggregator,
    MutualFundTranslator,
    SectorResolver,
)
from lookthrough.data.caching import ResolverCache
from lookthrough.data.catalogs import Catalogs, load_default_catalogs
from lookthrough.data.proxy_client import ProxyClient, build_proxy_client
from lookthrough.models.breakdown import AssetClassBucket
from lookthrough.models.catalog import CompanyOverview, ETFProfile
from lookthrough.models.holdings import Holding
from lookthrough.models.result import ExposureResult
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)

ProgressCallback = Callable[[str, float], None]


class PipelineMonitor:
    """Tracks phase durations for one run."""

    def __init__(self):
        self.start_time = time.time()
        self.phase_times: Dict[str, float] = {}

    def record_phase(self, phase: str, duration: float):
        self.phase_times[phase] = round(duration, 4)

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "execution_time_seconds": round(time.time() - self.start_time, 4),
            "phase_durations": self.phase_times,
        }


class ExposureEngine:
    """
    Look-through exposure engine.

    One instance owns one constituent cache and one sector cache. calculate()
    keeps every other piece of state local, so concurrent runs on different
    holding sets are safe.
    """

    def __init__(
        self,
        catalogs: Catalogs,
        proxy_client: Optional[ProxyClient] = None,
        constituent_cache: Optional[ResolverCache[ETFProfile]] = None,
        sector_cache: Optional[ResolverCache[CompanyOverview]] = None,
    ):
        """
        Initialize the engine.

        Args:
            catalogs: Validated static catalogs
            proxy_client: Optional batch lookup client; None keeps the engine offline
            constituent_cache: Cache for ETF profiles (a fresh one if omitted)
            sector_cache: Cache for sector data (a fresh one if omitted)
        """
        self.catalogs = catalogs
        self.proxy_client = proxy_client
        self.constituent_cache = (
            constituent_cache if constituent_cache is not None else ResolverCache("constituents")
        )
        self.sector_cache = sector_cache if sector_cache is not None else ResolverCache("sectors")

        self._categorizer = Categorizer(catalogs)
        self._translator = MutualFundTranslator(catalogs)
        self._constituents = ConstituentResolver(catalogs, self.constituent_cache, proxy_client)
        self._sectors = SectorResolver(catalogs, self.sector_cache, proxy_client)
        self._aggregator = ExposureAggregator(catalogs)
        self._classifier = AssetClassifier(catalogs)

    @classmethod
    def from_config(cls) -> "ExposureEngine":
        """Engine with the configured catalog directory and proxy settings."""
        return cls(load_default_catalogs(), proxy_client=build_proxy_client())

    def calculate(
        self,
        holdings: Iterable[Holding],
        progress_callback: Optional[ProgressCallback] = None,
    ) -> ExposureResult:
        """
        Run the full look-through pipeline.

        Holdings are processed in the order given; that order decides source
        ordering and which sector wins on conflicting data.

        Args:
            holdings: Portfolio holdings with market values already computed
            progress_callback: Function to call with (status_text, progress_0_to_1)

        Returns:
            ExposureResult; data problems show up in result.errors, never raise
        """
        if progress_callback is None:
            progress_callback = lambda msg, pct: logger.debug(f"[{pct * 100:.0f}%] {msg}")

        holdings = list(holdings)
        errors: List[PipelineError] = []
        monitor = PipelineMonitor()
        total_value = sum(h.market_value for h in holdings)

        logger.info(f"Calculating exposures for {len(holdings)} holdings (${total_value:,.2f})")

        # Phase 1: Categorize
        start = time.time()
        progress_callback("Categorizing holdings...", 0.1)
        categorized, phase_errors = self._categorizer.categorize(holdings)
        errors.extend(phase_errors)
        monitor.record_phase("categorization", time.time() - start)

        # Phase 2: Mutual funds -> synthetic ETF positions
        start = time.time()
        progress_callback("Translating mutual funds...", 0.2)
        synthetic, phase_errors = self._translator.translate(categorized.mutual_funds)
        errors.extend(phase_errors)
        etf_holdings = categorized.etfs + synthetic
        monitor.record_phase("translation", time.time() - start)

        # Phase 3: Constituents (one batch for all ETF symbols)
        start = time.time()
        progress_callback("Resolving ETF constituents...", 0.35)
        profiles, phase_errors = self._constituents.resolve(h.ticker for h in etf_holdings)
        errors.extend(phase_errors)
        monitor.record_phase("constituent_resolution", time.time() - start)

        # Phase 4: Sectors, needs the constituent tickers from phase 3
        start = time.time()
        progress_callback("Resolving sectors...", 0.5)
        tickers = [h.ticker for h in categorized.direct_stocks]
        for holding in etf_holdings:
            profile = profiles.get(holding.ticker)
            if profile is not None:
                tickers.extend(c.symbol for c in profile.constituents)
        overviews, phase_errors = self._sectors.resolve(tickers)
        errors.extend(phase_errors)
        monitor.record_phase("sector_resolution", time.time() - start)

        # Phase 5: Aggregate
        start = time.time()
        progress_callback("Calculating exposures...", 0.7)
        records, phase_errors = self._aggregator.aggregate(
            categorized.direct_stocks, etf_holdings, profiles, overviews
        )
        errors.extend(phase_errors)
        monitor.record_phase("aggregation", time.time() - start)

        # Phase 6: Finalize and roll up
        start = time.time()
        progress_callback("Building breakdowns...", 0.85)
        exposure_records, phase_errors = finalize_exposures(records.values(), total_value)
        errors.extend(phase_errors)
        sector_breakdown = aggregate_sectors(exposure_records, total_value)
        asset_classes, phase_errors = self._classifier.classify(holdings)
        errors.extend(phase_errors)
        monitor.record_phase("finalization", time.time() - start)

        progress_callback("Complete!", 1.0)

        if errors:
            logger.info(f"Run finished with {len(errors)} soft errors")

        return ExposureResult(
            exposure_records=exposure_records,
            total_portfolio_value=total_value,
            asset_class_breakdown=asset_classes,
            sector_breakdown=sector_breakdown,
            resolved_profiles=profiles,
            errors=errors,
            metrics=monitor.get_metrics(),
        )

    def asset_class_breakdown(self, holdings: Iterable[Holding]) -> List[AssetClassBucket]:
        """Asset-class view only; no constituent or sector resolution."""
        buckets, _ = self._classifier.classify(list(holdings))
        return buckets

    def exposures_by_account(
        self, holdings: Iterable[Holding], account_id: str
    ) -> ExposureResult:
        """Run the pipeline on one account's holdings."""
        account_holdings = [h for h in holdings if h.account_id == account_id]
        return self.calculate(account_holdings)

    def clear_caches(self) -> Dict[str, int]:
        """
        Drop every cached constituent and sector entry.

        Call whenever the holdings dataset changes owner (bulk import, reset)
        so stale lookups do not leak across unrelated portfolios.
        """
        removed = {
            "constituents": self.constituent_cache.clear(),
            "sectors": self.sector_cache.clear(),
        }
        logger.info(f"Resolver caches cleared: {removed}")
        return removed

    def cache_stats(self) -> Dict[str, dict]:
        return {
            "constituents": self.constituent_cache.stats(),
            "sectors": self.sector_cache.stats(),
        }
