"""
Exposure aggregation models.

Defines the structure for look-through exposure records, representing
what the investor effectively owns once every wrapper has been opened.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class ExposureSource(BaseModel):
    """
    One wrapper's contribution to a ticker's exposure.

    For synthetic holdings the origin is the mutual fund, and via_etf names
    the ETF proxy the value was routed through.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    origin_symbol: str
    origin_name: str
    percent_of_origin: float
    value_via_origin: float
    account_id: str = ""
    account_name: Optional[str] = None
    via_etf: Optional[str] = None


class DirectHolding(BaseModel):
    """Direct position in a ticker, tracked per account for drill-down."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    holding_id: str
    account_id: str = ""
    account_name: Optional[str] = None
    market_value: float


class ExposureSubRow(BaseModel):
    """Drill-down display row under an ExposureRecord."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str
    ticker: str
    name: str
    direct_value: float = 0.0
    etf_value: float = 0.0
    total_value: float = 0.0
    percent_of_portfolio: float = 0.0
    account_id: str = ""
    account_name: Optional[str] = None
    is_direct: bool = False


class ExposureRecord(BaseModel):
    """
    Look-through exposure to a single ticker (direct + via wrappers).

    total_value is derived from direct_value and etf_value on every read
    and is never stored on its own.

    Attributes:
        ticker: Underlying security symbol
        name: Display name
        sector: First non-empty sector seen for this ticker
        industry: First non-empty industry seen for this ticker
        direct_value: Value held directly across all accounts
        etf_value: Value held through ETFs (including mutual-fund proxies)
        percent_of_portfolio: Set by the finalizer
        sources: One entry per contributing wrapper holding
        direct_holdings: One entry per direct holding
        sub_rows: Drill-down rows, set by the finalizer
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ticker: str
    name: str = ""
    sector: Optional[str] = None
    industry: Optional[str] = None
    direct_value: float = 0.0
    etf_value: float = 0.0
    percent_of_portfolio: float = 0.0
    sources: List[ExposureSource] = Field(default_factory=list)
    direct_holdings: List[DirectHolding] = Field(default_factory=list)
    sub_rows: List[ExposureSubRow] = Field(default_factory=list)

    @computed_field(alias="totalValue")
    @property
    def total_value(self) -> float:
        """Direct plus indirect exposure value."""
        return self.direct_value + self.etf_value

    @property
    def id(self) -> str:
        return f"stock-{self.ticker}"

    def add_direct(self, holding: DirectHolding) -> None:
        self.direct_value += holding.market_value
        self.direct_holdings.append(holding)

    def add_indirect(self, source: ExposureSource) -> None:
        self.etf_value += source.value_via_origin
        self.sources.append(source)

    def classify(self, sector: Optional[str], industry: Optional[str]) -> None:
        """Set sector/industry only where still empty (first write wins)."""
        if not self.sector and sector:
            self.sector = sector
        if not self.industry and industry:
            self.industry = industry
