# core/services/decomposer.py
"""
Constituent Resolver - Looks up what each ETF holds.

Resolution order per symbol:
1. Resolver cache (populated by earlier runs)
2. Static ETF constituent catalog (baseline guarantee)
3. Optional batch network lookup for whatever is still missing

A failed network call falls back silently to what was already resolved.
Symbols nobody can resolve contribute nothing to look-through exposure.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from lookthrough.core.errors import ErrorPhase, ErrorType, PipelineError
from lookthrough.data.caching import ResolverCache, get_cache_key, unique_cache_keys
from lookthrough.data.catalogs import Catalogs
from lookthrough.data.proxy_client import ProxyClient, ProxyResponse
from lookthrough.models.catalog import ETFConstituent, ETFProfile
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)


def _parse_weight(raw: Any) -> Optional[float]:
    """Accept 5.2, "5.2" or "5.2%". Returns None when unparseable."""
    if raw is None:
        return None
    if isinstance(raw, str):
        raw = raw.strip().rstrip("%").strip()
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def parse_etf_payload(symbol: str, payload: Dict[str, Any]) -> Optional[ETFProfile]:
    """
    Convert one ETF entry of a batch holdings response into an ETFProfile.

    Constituents with a missing symbol or an unparseable weight are skipped.
    Returns None when nothing usable remains.
    """
    raw_holdings = payload.get("holdings")
    if raw_holdings is None:
        raw_holdings = payload.get("constituents", [])
    if isinstance(raw_holdings, dict):
        # Some providers nest the list one level down: {"data": [...]}
        raw_holdings = raw_holdings.get("data", [])

    constituents = []
    for raw in raw_holdings or []:
        if not isinstance(raw, dict):
            continue
        weight = _parse_weight(raw.get("weight", raw.get("weightPercent")))
        if weight is None or not raw.get("symbol"):
            logger.debug(f"Skipping unusable constituent in {symbol}: {raw}")
            continue
        try:
            constituents.append(
                ETFConstituent(
                    symbol=raw["symbol"],
                    name=raw.get("name") or raw["symbol"],
                    weight_percent=weight,
                    sector=raw.get("sector") or None,
                )
            )
        except ValidationError as e:
            logger.debug(f"Skipping invalid constituent in {symbol}: {e}")

    if not constituents:
        return None

    name = payload.get("name") or symbol
    try:
        return ETFProfile(
            symbol=symbol,
            name=name,
            constituents=constituents,
            last_updated=payload.get("lastUpdated"),
            source="network",
        )
    except ValidationError:
        return ETFProfile(
            symbol=symbol, name=name, constituents=constituents, source="network"
        )


class ConstituentResolver:
    """Resolves ETF symbols to constituent profiles. UI-agnostic."""

    def __init__(
        self,
        catalogs: Catalogs,
        cache: ResolverCache[ETFProfile],
        proxy_client: Optional[ProxyClient] = None,
    ):
        self.catalogs = catalogs
        self.cache = cache
        self.proxy_client = proxy_client

    def resolve(
        self, symbols: Iterable[str]
    ) -> Tuple[Dict[str, ETFProfile], List[PipelineError]]:
        """
        Resolve ETF symbols to profiles.

        Args:
            symbols: ETF symbols (real and synthetic holdings); duplicates are fine

        Returns:
            Tuple of (profiles, errors)
            - profiles: symbol -> ETFProfile for every resolvable symbol
            - errors: one MISSING_CATALOG_ENTRY per unresolved symbol, plus
              a NETWORK_FAILURE entry if the batch call failed
        """
        wanted = unique_cache_keys(symbols)
        profiles: Dict[str, ETFProfile] = {}
        errors: List[PipelineError] = []

        if not wanted:
            return profiles, errors

        missing = []
        for symbol in wanted:
            cached = self.cache.get(symbol)
            if cached is not None:
                profiles[symbol] = cached
                continue

            profile = self.catalogs.etf_profile(symbol)
            if profile is not None:
                profiles[symbol] = profile
                self.cache.set(symbol, profile)
            else:
                missing.append(symbol)

        if missing and self.proxy_client is not None:
            fetched, network_error = self._fetch_from_network(missing)
            if network_error:
                errors.append(network_error)
            for symbol, profile in fetched.items():
                profiles[symbol] = profile
                self.cache.set(symbol, profile)
            missing = [s for s in missing if s not in fetched]

        for symbol in missing:
            logger.warning(f"No constituent data for {symbol}; it adds no look-through exposure")
            errors.append(
                PipelineError(
                    phase=ErrorPhase.CONSTITUENT_RESOLUTION,
                    error_type=ErrorType.MISSING_CATALOG_ENTRY,
                    item=symbol,
                    message="No constituent data found",
                    fix_hint="Add the ETF to etf_constituents.json",
                )
            )

        total_constituents = sum(len(p.constituents) for p in profiles.values())
        logger.info(
            f"Constituent resolution complete: {len(profiles)}/{len(wanted)} ETFs, "
            f"{total_constituents} constituents"
        )
        return profiles, errors

    def _fetch_from_network(
        self, symbols: List[str]
    ) -> Tuple[Dict[str, ETFProfile], Optional[PipelineError]]:
        logger.info(f"Fetching ETF holdings for: {', '.join(symbols)}")
        try:
            response = self.proxy_client.fetch_etf_holdings(symbols)
        except Exception as e:
            logger.warning(f"ETF holdings lookup crashed: {e}", exc_info=True)
            response = ProxyResponse(success=False, data=None, error=str(e), status_code=0)

        if not response.success:
            logger.warning(
                f"ETF holdings lookup failed ({response.status_code}): {response.error}. "
                f"Using static data"
            )
            return {}, PipelineError(
                phase=ErrorPhase.CONSTITUENT_RESOLUTION,
                error_type=ErrorType.NETWORK_FAILURE,
                item=",".join(symbols),
                message=f"ETF holdings lookup failed: {response.error}",
                fix_hint="Check network connectivity or proxy configuration",
            )

        data = {get_cache_key(k): v for k, v in (response.data or {}).items()}
        fetched = {}
        for symbol in symbols:
            payload = data.get(symbol)
            if not isinstance(payload, dict):
                continue
            profile = parse_etf_payload(symbol, payload)
            if profile is not None:
                fetched[symbol] = profile
                logger.debug(f"Fetched {len(profile.constituents)} holdings for {symbol}")

        return fetched, None
