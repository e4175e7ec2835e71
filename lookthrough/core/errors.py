# core/errors.py
"""
Structured error types for the exposure pipeline.

Data-quality problems never raise; they are collected as PipelineError
records on the result so callers can inspect what degraded. Only catalog
corruption (load time) and contract violations raise.
"""

from dataclasses import dataclass, field
from typing import Optional
from enum import Enum
from datetime import datetime


class ErrorPhase(Enum):
    """Phase where error occurred."""
    CATEGORIZATION = "CATEGORIZATION"
    TRANSLATION = "TRANSLATION"
    CONSTITUENT_RESOLUTION = "CONSTITUENT_RESOLUTION"
    SECTOR_RESOLUTION = "SECTOR_RESOLUTION"
    ASSET_CLASSIFICATION = "ASSET_CLASSIFICATION"
    FINALIZATION = "FINALIZATION"


class ErrorType(Enum):
    """Type of error for categorization."""
    MISSING_CATALOG_ENTRY = "MISSING_CATALOG_ENTRY"
    NETWORK_FAILURE = "NETWORK_FAILURE"
    DIVIDE_BY_ZERO_GUARD = "DIVIDE_BY_ZERO_GUARD"
    MALFORMED_MAPPING = "MALFORMED_MAPPING"
    VALIDATION_FAILED = "VALIDATION_FAILED"


@dataclass
class PipelineError:
    """Structured soft failure recorded during a pipeline run."""
    phase: ErrorPhase
    error_type: ErrorType
    item: str  # ticker or identifier
    message: str
    fix_hint: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization (camelCase keys)."""
        return {
            "phase": self.phase.value,
            "errorType": self.error_type.value,
            "item": self.item,
            "message": self.message,
            "fixHint": self.fix_hint,
            "timestamp": self.timestamp,
        }


class CatalogError(ValueError):
    """Raised when a static catalog entry is malformed."""

    def __init__(self, catalog: str, key: str, message: str):
        self.catalog = catalog
        self.key = key
        super().__init__(f"{catalog}[{key}]: {message}")


class ContractViolation(RuntimeError):
    """Raised when an engine stage is called with inputs that break its contract."""
