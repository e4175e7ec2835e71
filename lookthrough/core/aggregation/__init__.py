"""
Roll-ups and finalization for exposure results.

Public API:
    AssetClassifier(catalogs).classify(holdings) -> (buckets, errors)
    aggregate_sectors(records, total) -> sector buckets
    finalize_exposures(records, total) -> (sorted records, errors)
"""

from .classification import AssetClassifier
from .grouping import aggregate_sectors
from .output import build_sub_rows, finalize_exposures

__all__ = ["AssetClassifier", "aggregate_sectors", "build_sub_rows", "finalize_exposures"]
