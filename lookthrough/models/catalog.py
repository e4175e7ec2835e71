"""
Static catalog models.

Catalog JSON is parsed into these records once, at load time, so that a
malformed entry fails immediately instead of at lookup time.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


def _upper_symbol(v: str) -> str:
    v = (v or "").strip().upper()
    if not v:
        raise ValueError("symbol must not be empty")
    return v


class ETFConstituent(BaseModel):
    """
    Single security held by an ETF.

    Weights are percentages (0-100) and need not sum to 100 across a
    profile; catalogs usually only list the top holdings.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    name: str = ""
    weight_percent: float = Field(..., ge=0.0, le=100.0, alias="weightPercent")
    sector: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return _upper_symbol(v)


class ETFProfile(BaseModel):
    """ETF with its resolved constituent list, cached by symbol."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    name: str = ""
    constituents: List[ETFConstituent] = Field(default_factory=list)
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")
    source: str = "catalog"

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return _upper_symbol(v)

    @computed_field
    @property
    def total_weight(self) -> float:
        """Sum of constituent weights (usually below 100)."""
        return sum(c.weight_percent for c in self.constituents)


class MutualFundMapping(BaseModel):
    """One row mapping part of a mutual fund onto an ETF proxy."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    mutual_fund_symbol: str
    etf_symbol: str = Field(..., alias="etf")
    percentage: float = Field(..., ge=0.0)
    notes: str = ""

    @field_validator("mutual_fund_symbol", "etf_symbol")
    @classmethod
    def normalize_symbols(cls, v: str) -> str:
        return _upper_symbol(v)


class MutualFundEntry(BaseModel):
    """Mutual fund with its ETF mapping rows."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: str = ""
    description: str = ""
    mappings: List[MutualFundMapping] = Field(default_factory=list)

    @computed_field
    @property
    def total_percentage(self) -> float:
        return sum(m.percentage for m in self.mappings)


class AssetClassAllocation(BaseModel):
    """Share of an ETF allocated to one asset class."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    class_id: str = Field(..., alias="class", min_length=1)
    percentage: float = Field(..., ge=0.0, le=100.0)


class AssetClassInfo(BaseModel):
    """Display metadata for an asset class bucket."""

    model_config = ConfigDict(frozen=True)

    class_id: str
    name: str
    color: str = "#6B7280"


class StockClassification(BaseModel):
    """Catalog entry for a single stock: asset class plus sector data."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    symbol: str
    class_id: str = Field(..., alias="class", min_length=1)
    name: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None


class CompanyOverview(BaseModel):
    """Sector/industry lookup result for a ticker."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    name: Optional[str] = None
    sector: Optional[str] = None
    industry: Optional[str] = None
    source: str = "catalog"

    @property
    def is_known(self) -> bool:
        return bool(self.sector) and self.sector != "Unknown"
