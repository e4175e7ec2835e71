# core/services/__init__.py
"""
Services package for the exposure pipeline.

Each service takes typed inputs and returns (result, errors); none of them
raise for data-quality problems.
"""

from .categorizer import Categorizer, CategorizedHoldings
from .translator import MutualFundTranslator
from .decomposer import ConstituentResolver
from .enricher import SectorResolver
from .aggregator import ExposureAggregator

__all__ = [
    "Categorizer",
    "CategorizedHoldings",
    "MutualFundTranslator",
    "ConstituentResolver",
    "SectorResolver",
    "ExposureAggregator",
]
