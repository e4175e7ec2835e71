"""
Exposure Insights

Derived views over a finished ExposureResult for the display layer:
top positions, concentration checks and a sector -> ticker tree.
No recalculation happens here.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from lookthrough import config
from lookthrough.models.exposure import ExposureRecord
from lookthrough.models.result import ExposureResult

CONCENTRATION_WARNING_PCT = 10.0
CONCENTRATION_LIMIT_PCT = 20.0


@dataclass
class SectorGroup:
    """One sector node with its ticker children, largest first."""

    name: str
    value: float = 0.0
    children: List[ExposureRecord] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "children": [
                {
                    "name": r.ticker or r.name,
                    "ticker": r.ticker,
                    "value": r.total_value,
                    "percentage": r.percent_of_portfolio,
                }
                for r in self.children
            ],
        }


def top_exposures(result: ExposureResult, limit: int = 10) -> List[ExposureRecord]:
    """Largest exposures by total value."""
    if limit <= 0:
        return []
    ranked = sorted(result.exposure_records, key=lambda r: (-r.total_value, r.ticker))
    return ranked[:limit]


def check_concentration_risk(
    result: ExposureResult, ticker: str, additional_value: float
) -> Dict[str, Any]:
    """
    Check whether buying more of a ticker would concentrate the portfolio.

    Args:
        result: Current exposure result
        ticker: Ticker that would be bought
        additional_value: Value of the planned purchase

    Returns:
        Dict with would_exceed_10_percent, would_exceed_20_percent,
        new_percentage and current_percentage
    """
    record = result.get_record(ticker)
    current_value = record.total_value if record else 0.0
    new_value = current_value + additional_value
    new_total = result.total_portfolio_value + additional_value
    new_percentage = new_value / new_total * 100 if new_total > 0 else 0.0

    return {
        "would_exceed_10_percent": new_percentage > CONCENTRATION_WARNING_PCT,
        "would_exceed_20_percent": new_percentage > CONCENTRATION_LIMIT_PCT,
        "new_percentage": new_percentage,
        "current_percentage": record.percent_of_portfolio if record else 0.0,
    }


def group_by_sector(result: ExposureResult) -> List[SectorGroup]:
    """
    Group exposures into a sector tree.

    Sectors come out in the order of result.sector_breakdown; children keep
    the order of result.exposure_records.
    """
    groups: Dict[str, SectorGroup] = {}
    for bucket in result.sector_breakdown:
        groups[bucket.sector_name] = SectorGroup(name=bucket.sector_name)

    for record in result.exposure_records:
        sector = record.sector or config.UNKNOWN_SECTOR
        group = groups.setdefault(sector, SectorGroup(name=sector))
        group.children.append(record)
        group.value += record.total_value

    return list(groups.values())
