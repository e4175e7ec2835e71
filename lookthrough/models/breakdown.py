"""Roll-up buckets for the asset-class and sector views."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AssetClassBucket(BaseModel):
    """Wrapper-level raw value allocated to one asset class."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    class_id: str
    display_name: str
    market_value: float
    percentage: float
    color: str = "#6B7280"


class SectorBucket(BaseModel):
    """Look-through exposure value summed for one sector."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    sector_name: str
    market_value: float
    percentage: float
