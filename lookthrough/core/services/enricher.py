# core/services/enricher.py
"""
Sector Resolver - Adds sector and industry metadata per ticker.

Flow: resolver cache -> static stock classifications -> batch company
overview lookup. Tickers nobody can classify stay unknown and roll up
under "Unknown" later.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from lookthrough.core.errors import ErrorPhase, ErrorType, PipelineError
from lookthrough.data.caching import ResolverCache, get_cache_key, unique_cache_keys
from lookthrough.data.catalogs import Catalogs
from lookthrough.data.proxy_client import ProxyClient, ProxyResponse
from lookthrough.models.catalog import CompanyOverview
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


def parse_overview_payload(symbol: str, payload: Dict[str, Any]) -> CompanyOverview:
    """Build a CompanyOverview from one entry of a batch overview response."""
    return CompanyOverview(
        symbol=symbol,
        name=payload.get("name") or None,
        sector=payload.get("sector") or None,
        industry=payload.get("industry") or None,
        source="network",
    )


class SectorResolver:
    """Resolves tickers to sector/industry. UI-agnostic."""

    def __init__(
        self,
        catalogs: Catalogs,
        cache: ResolverCache[CompanyOverview],
        proxy_client: Optional[ProxyClient] = None,
    ):
        self.catalogs = catalogs
        self.cache = cache
        self.proxy_client = proxy_client

    def resolve(
        self, symbols: Iterable[str]
    ) -> Tuple[Dict[str, CompanyOverview], List[PipelineError]]:
        """
        Resolve sector/industry for a set of tickers.

        Args:
            symbols: Direct-stock and constituent tickers; duplicates are fine

        Returns:
            Tuple of (overviews, errors)
            - overviews: ticker -> CompanyOverview for every classified ticker
            - errors: a NETWORK_FAILURE entry if the batch call failed
        """
        wanted = unique_cache_keys(symbols)

        overviews: Dict[str, CompanyOverview] = {}
        errors: List[PipelineError] = []

        if not wanted:
            return overviews, errors

        missing = []
        for symbol in wanted:
            cached = self.cache.get(symbol)
            if cached is not None:
                overviews[symbol] = cached
                continue

            entry = self.catalogs.stock_classification(symbol)
            if entry is not None and entry.sector:
                overview = CompanyOverview(
                    symbol=symbol,
                    name=entry.name,
                    sector=entry.sector,
                    industry=entry.industry,
                    source="catalog",
                )
                overviews[symbol] = overview
                self.cache.set(symbol, overview)
            else:
                missing.append(symbol)

        if missing and self.proxy_client is not None:
            fetched, network_error = self._fetch_from_network(missing)
            if network_error:
                errors.append(network_error)
            for symbol, overview in fetched.items():
                overviews[symbol] = overview
                self.cache.set(symbol, overview)
            missing = [s for s in missing if s not in fetched]

        if missing:
            logger.debug(
                f"No sector data for {len(missing)} tickers: "
                f"{', '.join(missing[:5])}{'...' if len(missing) > 5 else ''}"
            )

        logger.info(f"Sector resolution complete: {len(overviews)}/{len(wanted)} tickers")
        return overviews, errors

    def _fetch_from_network(
        self, symbols: List[str]
    ) -> Tuple[Dict[str, CompanyOverview], Optional[PipelineError]]:
        logger.info(f"Fetching company overviews for {len(symbols)} tickers")
        try:
            response = self.proxy_client.fetch_company_overviews(symbols)
        except Exception as e:
            logger.warning(f"Company overview lookup crashed: {e}", exc_info=True)
            response = ProxyResponse(success=False, data=None, error=str(e), status_code=0)

        if not response.success:
            logger.warning(
                f"Company overview lookup failed ({response.status_code}): "
                f"{response.error}. Sectors stay Unknown"
            )
            return {}, PipelineError(
                phase=ErrorPhase.SECTOR_RESOLUTION,
                error_type=ErrorType.NETWORK_FAILURE,
                item=",".join(symbols),
                message=f"Company overview lookup failed: {response.error}",
                fix_hint="Check network connectivity or proxy configuration",
            )

        data = {get_cache_key(k): v for k, v in (response.data or {}).items()}
        fetched = {}
        for symbol in symbols:
            payload = data.get(symbol)
            if not isinstance(payload, dict):
                continue
            overview = parse_overview_payload(symbol, payload)
            # Only known results are cached so a later run can retry the rest
            if overview.is_known:
                fetched[symbol] = overview

        return fetched, None
