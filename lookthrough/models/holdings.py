"""
Portfolio holding models.

Holdings are the engine's only input. They are created by the caller with
market values already computed and are never mutated by the engine.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HoldingType(str, Enum):
    """Kind of position held in an account."""

    STOCK = "stock"
    FUND = "fund"
    CASH = "cash"


class Holding(BaseModel):
    """
    Single position in a brokerage account.

    Attributes:
        id: Caller-assigned identifier, unique per holding
        account_id: Account holding the position
        account_name: Display name of the account
        ticker: Trading symbol (None for cash)
        name: Display name of the security
        quantity: Units held
        last_price: Latest unit price
        market_value: quantity * last_price, supplied by the caller; negative
            for short positions, margin or overdrawn cash
        type: stock, fund (ETF or mutual fund) or cash
        is_manual_entry: Entered by hand; user-supplied name/sector win
        is_us_stock: Manual override of the US/international split
        sector: Manual sector override
        industry: Manual industry override
        origin_fund: Set on synthetic ETF holdings derived from a mutual fund
        mapping_notes: Notes of the mapping row that produced a synthetic holding
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    account_id: str = Field(default="", alias="accountId")
    account_name: Optional[str] = Field(default=None, alias="accountName")
    ticker: Optional[str] = None
    name: str = ""
    quantity: float = 0.0
    last_price: float = Field(default=0.0, alias="lastPrice")
    market_value: float = Field(..., alias="marketValue", allow_inf_nan=False)
    type: HoldingType
    is_manual_entry: bool = Field(default=False, alias="isManualEntry")
    is_us_stock: Optional[bool] = Field(default=None, alias="isUSStock")
    sector: Optional[str] = None
    industry: Optional[str] = None
    origin_fund: Optional[str] = Field(default=None, alias="originFund")
    mapping_notes: Optional[str] = Field(default=None, alias="mappingNotes")

    @field_validator("ticker")
    @classmethod
    def normalize_ticker(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        return v or None

    @property
    def is_synthetic(self) -> bool:
        """True for ETF positions manufactured from a mutual-fund mapping."""
        return self.origin_fund is not None
