"""Result container returned by a single engine run."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import pandas as pd
from pydantic.alias_generators import to_camel

from lookthrough.core.errors import PipelineError
from lookthrough.models.breakdown import AssetClassBucket, SectorBucket
from lookthrough.models.catalog import ETFProfile
from lookthrough.models.exposure import ExposureRecord

EXPOSURE_COLUMNS = [
    "ticker",
    "name",
    "sector",
    "industry",
    "direct_value",
    "etf_value",
    "total_value",
    "percent_of_portfolio",
    "source_count",
]


@dataclass
class ExposureResult:
    """Output of ExposureEngine.calculate()."""

    exposure_records: List[ExposureRecord]
    total_portfolio_value: float
    asset_class_breakdown: List[AssetClassBucket]
    sector_breakdown: List[SectorBucket]
    resolved_profiles: Dict[str, ETFProfile]
    calculated_at: datetime = field(default_factory=datetime.now)
    errors: List[PipelineError] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def get_record(self, ticker: str) -> Optional[ExposureRecord]:
        ticker = ticker.upper()
        for record in self.exposure_records:
            if record.ticker == ticker:
                return record
        return None

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten exposure records into a DataFrame (one row per ticker).

        Returns:
            DataFrame with EXPOSURE_COLUMNS, in the result's sort order
        """
        if not self.exposure_records:
            return pd.DataFrame(columns=EXPOSURE_COLUMNS)

        rows = [
            {
                "ticker": r.ticker,
                "name": r.name,
                "sector": r.sector,
                "industry": r.industry,
                "direct_value": r.direct_value,
                "etf_value": r.etf_value,
                "total_value": r.total_value,
                "percent_of_portfolio": r.percent_of_portfolio,
                "source_count": len(r.sources),
            }
            for r in self.exposure_records
        ]
        return pd.DataFrame(rows, columns=EXPOSURE_COLUMNS)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready representation (camelCase keys for the display layer)."""
        return {
            "exposureRecords": [
                r.model_dump(mode="json", by_alias=True, exclude={"direct_holdings"})
                for r in self.exposure_records
            ],
            "totalPortfolioValue": self.total_portfolio_value,
            "assetClassBreakdown": [
                b.model_dump(mode="json", by_alias=True) for b in self.asset_class_breakdown
            ],
            "sectorBreakdown": [b.model_dump(mode="json", by_alias=True) for b in self.sector_breakdown],
            "resolvedProfiles": sorted(self.resolved_profiles.keys()),
            "calculatedAt": self.calculated_at.isoformat(),
            "errors": [e.to_dict() for e in self.errors],
            "metrics": {to_camel(k): v for k, v in self.metrics.items()},
        }
