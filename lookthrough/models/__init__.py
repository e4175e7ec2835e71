"""
Pydantic models for type-safe data structures throughout the engine.

Usage:
    from lookthrough.models import Holding, HoldingType, ExposureRecord
"""

from .holdings import Holding, HoldingType
from .catalog import (
    AssetClassAllocation,
    AssetClassInfo,
    CompanyOverview,
    ETFConstituent,
    ETFProfile,
    MutualFundEntry,
    MutualFundMapping,
    StockClassification,
)
from .exposure import DirectHolding, ExposureRecord, ExposureSource, ExposureSubRow
from .breakdown import AssetClassBucket, SectorBucket

__all__ = [
    # Input
    "Holding",
    "HoldingType",
    # Catalog
    "AssetClassAllocation",
    "AssetClassInfo",
    "CompanyOverview",
    "ETFConstituent",
    "ETFProfile",
    "MutualFundEntry",
    "MutualFundMapping",
    "StockClassification",
    # Exposure
    "DirectHolding",
    "ExposureRecord",
    "ExposureSource",
    "ExposureSubRow",
    # Roll-ups
    "AssetClassBucket",
    "SectorBucket",
]
