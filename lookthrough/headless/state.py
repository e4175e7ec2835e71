"""Engine Singleton.

The headless interface serves every request from one ExposureEngine so
that its resolver caches survive between requests. The engine is created
on first access to avoid import-time catalog loading.
"""

import threading
from typing import TYPE_CHECKING, Optional

from lookthrough.utils.logging_config import get_logger

if TYPE_CHECKING:
    from lookthrough.core.pipeline import ExposureEngine

logger = get_logger(__name__)

_engine: "Optional[ExposureEngine]" = None
_engine_lock = threading.Lock()


def get_engine() -> "ExposureEngine":
    """Get or create the ExposureEngine singleton from configuration."""
    global _engine
    with _engine_lock:
        if _engine is None:
            from lookthrough.core.pipeline import ExposureEngine

            logger.debug("Initializing ExposureEngine singleton")
            _engine = ExposureEngine.from_config()
        return _engine


def set_engine(engine: "ExposureEngine") -> None:
    """Install a pre-built engine (custom catalogs, injected caches)."""
    global _engine
    with _engine_lock:
        _engine = engine


def reset_state() -> None:
    """Drop the singleton (for testing only)."""
    global _engine
    logger.debug("Resetting headless engine singleton")
    with _engine_lock:
        _engine = None
