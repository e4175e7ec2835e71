import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

# Package directory (lookthrough/)
PACKAGE_ROOT = Path(__file__).parent.resolve()

# Bundled catalog data, versioned with the package
DEFAULT_CATALOG_DIR = PACKAGE_ROOT / "data" / "catalog"


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


# Alternate catalog directory (same file layout as DEFAULT_CATALOG_DIR)
_catalog_dir = os.getenv("LOOKTHROUGH_CATALOG_DIR")
CATALOG_DIR: Path = Path(_catalog_dir) if _catalog_dir else DEFAULT_CATALOG_DIR

# Optional batch lookups (ETF holdings, company overviews)
PROXY_URL: Optional[str] = os.getenv("LOOKTHROUGH_PROXY_URL") or None
NETWORK_ENABLED: bool = _env_flag("LOOKTHROUGH_NETWORK_ENABLED", PROXY_URL is not None)
NETWORK_TIMEOUT: float = _env_float("LOOKTHROUGH_NETWORK_TIMEOUT", 10.0)

# Asset class used whenever a ticker cannot be classified
DEFAULT_ASSET_CLASS = "us_equity"
CASH_ASSET_CLASS = "cash"
UNKNOWN_SECTOR = "Unknown"
