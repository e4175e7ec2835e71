"""
Asset-class allocation over raw holdings.

Works on wrapper-level value (what each position is worth), not on
look-through exposure. Every dollar lands in some bucket: unknown tickers
fall back to us_equity so the buckets always add up to the portfolio total.
"""

from typing import Dict, List, Sequence, Tuple

from lookthrough import config
from lookthrough.core.errors import ErrorPhase, ErrorType, PipelineError
from lookthrough.data.catalogs import Catalogs
from lookthrough.models.breakdown import AssetClassBucket
from lookthrough.models.holdings import Holding, HoldingType
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)

INTL_ASSET_CLASS = "intl_equity"


class AssetClassifier:
    """Allocates holding value across asset-class buckets."""

    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    def classify(
        self, holdings: Sequence[Holding]
    ) -> Tuple[List[AssetClassBucket], List[PipelineError]]:
        """
        Build the asset-class breakdown for a set of holdings.

        - cash: whole value to "cash"
        - ETF: split by its catalog breakdown, else us_equity
        - mutual fund: split by its ETF mappings, then each ETF's breakdown
        - stock: manual US flag, else catalog class, else us_equity

        Returns:
            Tuple of (buckets sorted by value descending, errors)
        """
        allocations: Dict[str, float] = {}
        errors: List[PipelineError] = []

        for holding in holdings:
            value = holding.market_value

            if holding.type == HoldingType.CASH:
                _add(allocations, config.CASH_ASSET_CLASS, value)
            elif holding.type == HoldingType.STOCK:
                _add(allocations, self._stock_class(holding), value)
            elif holding.ticker and self.catalogs.is_mutual_fund(holding.ticker):
                self._allocate_mutual_fund(allocations, holding.ticker, value, errors)
            else:
                self._allocate_etf(allocations, holding.ticker, value, errors)

        total = sum(h.market_value for h in holdings)
        buckets = [
            self._bucket(class_id, value, total) for class_id, value in allocations.items()
        ]
        buckets.sort(key=lambda b: (-b.market_value, b.class_id))

        logger.info(f"Asset-class breakdown complete: {len(buckets)} buckets, total ${total:,.2f}")
        return buckets, errors

    def _stock_class(self, holding: Holding) -> str:
        if holding.is_us_stock is not None:
            return config.DEFAULT_ASSET_CLASS if holding.is_us_stock else INTL_ASSET_CLASS
        if holding.ticker:
            entry = self.catalogs.stock_classification(holding.ticker)
            if entry is not None:
                return entry.class_id
        return config.DEFAULT_ASSET_CLASS

    def _allocate_etf(
        self,
        allocations: Dict[str, float],
        symbol: str,
        value: float,
        errors: List[PipelineError],
    ) -> None:
        breakdown = self.catalogs.etf_breakdown(symbol) if symbol else None
        if not breakdown:
            logger.debug(f"No asset-class breakdown for {symbol}; using {config.DEFAULT_ASSET_CLASS}")
            _add(allocations, config.DEFAULT_ASSET_CLASS, value)
            errors.append(
                PipelineError(
                    phase=ErrorPhase.ASSET_CLASSIFICATION,
                    error_type=ErrorType.MISSING_CATALOG_ENTRY,
                    item=symbol or "<no ticker>",
                    message=f"No asset-class breakdown; counted as {config.DEFAULT_ASSET_CLASS}",
                    fix_hint="Add the ETF to asset_classifications.json",
                )
            )
            return

        # Breakdowns may be off by rounding; normalise so the whole value is allocated
        covered = sum(a.percentage for a in breakdown)
        for allocation in breakdown:
            _add(allocations, allocation.class_id, value * allocation.percentage / covered)

    def _allocate_mutual_fund(
        self,
        allocations: Dict[str, float],
        symbol: str,
        value: float,
        errors: List[PipelineError],
    ) -> None:
        entry = self.catalogs.mutual_fund(symbol)
        mapped = entry.total_percentage
        scale = 100.0 / mapped if mapped > 100.0 else 1.0

        for mapping in entry.mappings:
            self._allocate_etf(
                allocations,
                mapping.etf_symbol,
                value * mapping.percentage / 100 * scale,
                errors,
            )

        if mapped < 100.0:
            _add(allocations, config.DEFAULT_ASSET_CLASS, value * (100.0 - mapped) / 100)

    def _bucket(self, class_id: str, value: float, total: float) -> AssetClassBucket:
        info = self.catalogs.asset_class_info(class_id)
        return AssetClassBucket(
            class_id=class_id,
            display_name=info.name if info else class_id.replace("_", " ").title(),
            market_value=value,
            percentage=value / total * 100 if total > 0 else 0.0,
            color=info.color if info else "#6B7280",
        )


def _add(allocations: Dict[str, float], class_id: str, value: float) -> None:
    allocations[class_id] = allocations.get(class_id, 0.0) + value
