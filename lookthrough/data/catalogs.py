# data/catalogs.py
"""
Static Catalog Loader

Loads the three versioned lookup tables the engine runs on:
- etf_constituents.json      ETF symbol -> constituents with weights
- mutual_fund_mappings.json  mutual fund -> ETF proxies with percentages
- asset_classifications.json stock/ETF asset classes and class metadata

Every entry is validated into a typed model when the catalog is loaded.
A malformed entry raises CatalogError right away rather than surfacing as
a bad lookup in the middle of a pipeline run.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from lookthrough import config
from lookthrough.core.errors import CatalogError
from lookthrough.models.catalog import (
    AssetClassAllocation,
    AssetClassInfo,
    ETFConstituent,
    ETFProfile,
    MutualFundEntry,
    MutualFundMapping,
    StockClassification,
)
from lookthrough.utils.logging_config import get_logger

logger = get_logger(__name__)

ETF_CONSTITUENTS_FILE = "etf_constituents.json"
MUTUAL_FUND_MAPPINGS_FILE = "mutual_fund_mappings.json"
ASSET_CLASSIFICATIONS_FILE = "asset_classifications.json"

# ETF asset-class breakdowns must cover the whole fund
BREAKDOWN_TOLERANCE = 0.5


class Catalogs:
    """Read-only bundle of validated catalog tables."""

    def __init__(
        self,
        etf_profiles: Dict[str, ETFProfile],
        mutual_funds: Dict[str, MutualFundEntry],
        stock_classes: Dict[str, StockClassification],
        etf_breakdowns: Dict[str, List[AssetClassAllocation]],
        asset_classes: Dict[str, AssetClassInfo],
        version: str = "unversioned",
    ):
        self._etf_profiles = etf_profiles
        self._mutual_funds = mutual_funds
        self._stock_classes = stock_classes
        self._etf_breakdowns = etf_breakdowns
        self._asset_classes = asset_classes
        self.version = version

    # === Construction ===

    @classmethod
    def from_dicts(
        cls,
        etf_constituents: Optional[Dict[str, Any]] = None,
        mutual_fund_mappings: Optional[Dict[str, Any]] = None,
        asset_classifications: Optional[Dict[str, Any]] = None,
    ) -> "Catalogs":
        """
        Build catalogs from raw JSON-shaped dicts.

        Args:
            etf_constituents: {symbol: {name, constituents: [...]}}
            mutual_fund_mappings: {symbol: {name, description?, mappings: [...]}}
            asset_classifications: {stocks: {...}, etfs: {...}, assetClasses: {...}}

        Raises:
            CatalogError: If any entry fails validation
        """
        etf_constituents = etf_constituents or {}
        mutual_fund_mappings = mutual_fund_mappings or {}
        asset_classifications = asset_classifications or {}

        etf_profiles = _parse_etf_profiles(etf_constituents)
        mutual_funds = _parse_mutual_funds(mutual_fund_mappings)
        stock_classes = _parse_stock_classes(asset_classifications.get("stocks", {}))
        etf_breakdowns = _parse_etf_breakdowns(asset_classifications.get("etfs", {}))
        asset_classes = _parse_asset_classes(
            asset_classifications.get("assetClasses", {})
        )

        version = str(
            etf_constituents.get("_version")
            or asset_classifications.get("_version")
            or "unversioned"
        )

        catalogs = cls(
            etf_profiles=etf_profiles,
            mutual_funds=mutual_funds,
            stock_classes=stock_classes,
            etf_breakdowns=etf_breakdowns,
            asset_classes=asset_classes,
            version=version,
        )
        logger.debug(
            f"Catalogs {version} loaded: {len(etf_profiles)} ETFs, "
            f"{len(mutual_funds)} mutual funds, {len(stock_classes)} stocks"
        )
        return catalogs

    # === Lookups ===

    def etf_profile(self, symbol: str) -> Optional[ETFProfile]:
        return self._etf_profiles.get(symbol.upper())

    def mutual_fund(self, symbol: str) -> Optional[MutualFundEntry]:
        return self._mutual_funds.get(symbol.upper())

    def is_mutual_fund(self, symbol: Optional[str]) -> bool:
        return bool(symbol) and symbol.upper() in self._mutual_funds

    def etf_breakdown(self, symbol: str) -> Optional[List[AssetClassAllocation]]:
        return self._etf_breakdowns.get(symbol.upper())

    def stock_classification(self, symbol: str) -> Optional[StockClassification]:
        return self._stock_classes.get(symbol.upper())

    def asset_class_info(self, class_id: str) -> Optional[AssetClassInfo]:
        return self._asset_classes.get(class_id)

    @property
    def etf_symbols(self) -> List[str]:
        return sorted(self._etf_profiles)


def _entries(table: Dict[str, Any]):
    """Yield (key, value) pairs, skipping metadata keys such as _version."""
    for key, value in table.items():
        if key.startswith("_"):
            continue
        if not isinstance(value, dict):
            raise CatalogError("catalog", key, "entry must be an object")
        yield key.strip().upper(), value


def _parse_etf_profiles(table: Dict[str, Any]) -> Dict[str, ETFProfile]:
    profiles = {}
    for symbol, raw in _entries(table):
        try:
            constituents = [
                ETFConstituent.model_validate(c) for c in raw.get("constituents", [])
            ]
            profiles[symbol] = ETFProfile(
                symbol=symbol,
                name=raw.get("name", symbol),
                constituents=constituents,
                source="catalog",
            )
        except ValidationError as e:
            raise CatalogError(ETF_CONSTITUENTS_FILE, symbol, str(e)) from e
    return profiles


def _parse_mutual_funds(table: Dict[str, Any]) -> Dict[str, MutualFundEntry]:
    funds = {}
    for symbol, raw in _entries(table):
        try:
            mappings = [
                MutualFundMapping.model_validate({**m, "mutual_fund_symbol": symbol})
                for m in raw.get("mappings", [])
            ]
            funds[symbol] = MutualFundEntry(
                symbol=symbol,
                name=raw.get("name", symbol),
                description=raw.get("description", ""),
                mappings=mappings,
            )
        except ValidationError as e:
            raise CatalogError(MUTUAL_FUND_MAPPINGS_FILE, symbol, str(e)) from e

        if not funds[symbol].mappings:
            raise CatalogError(MUTUAL_FUND_MAPPINGS_FILE, symbol, "no mappings listed")
    return funds


def _parse_stock_classes(table: Dict[str, Any]) -> Dict[str, StockClassification]:
    stocks = {}
    for symbol, raw in _entries(table):
        try:
            stocks[symbol] = StockClassification.model_validate(
                {**raw, "symbol": symbol}
            )
        except ValidationError as e:
            raise CatalogError(ASSET_CLASSIFICATIONS_FILE, symbol, str(e)) from e
    return stocks


def _parse_etf_breakdowns(
    table: Dict[str, Any],
) -> Dict[str, List[AssetClassAllocation]]:
    breakdowns = {}
    for symbol, raw in _entries(table):
        try:
            allocations = [
                AssetClassAllocation.model_validate(b) for b in raw.get("breakdown", [])
            ]
        except ValidationError as e:
            raise CatalogError(ASSET_CLASSIFICATIONS_FILE, symbol, str(e)) from e

        total = sum(a.percentage for a in allocations)
        if abs(total - 100.0) > BREAKDOWN_TOLERANCE:
            raise CatalogError(
                ASSET_CLASSIFICATIONS_FILE,
                symbol,
                f"breakdown sums to {total:.2f}%, expected 100%",
            )
        breakdowns[symbol] = allocations
    return breakdowns


def _parse_asset_classes(table: Dict[str, Any]) -> Dict[str, AssetClassInfo]:
    classes = {}
    for key, raw in table.items():
        if key.startswith("_"):
            continue
        try:
            classes[key] = AssetClassInfo.model_validate({**raw, "class_id": key})
        except (ValidationError, TypeError) as e:
            raise CatalogError(ASSET_CLASSIFICATIONS_FILE, key, str(e)) from e
    return classes


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning(f"Catalog file missing: {path}. Using empty table.")
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise CatalogError(path.name, "*", f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError(path.name, "*", "top level must be an object")
    return data


def load_catalogs(directory: Path) -> Catalogs:
    """
    Load and validate all catalog files from a directory.

    Args:
        directory: Folder holding the three catalog JSON files

    Returns:
        Validated Catalogs

    Raises:
        CatalogError: On malformed JSON or entries
    """
    directory = Path(directory)
    return Catalogs.from_dicts(
        etf_constituents=_read_json(directory / ETF_CONSTITUENTS_FILE),
        mutual_fund_mappings=_read_json(directory / MUTUAL_FUND_MAPPINGS_FILE),
        asset_classifications=_read_json(directory / ASSET_CLASSIFICATIONS_FILE),
    )


def load_default_catalogs() -> Catalogs:
    """Load catalogs from LOOKTHROUGH_CATALOG_DIR or the bundled set."""
    return load_catalogs(config.CATALOG_DIR)
