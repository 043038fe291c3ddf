"""Aggregate arrear segments into totals and a year-wise breakdown.

Used by the CLI totals footer, the MCP tools, and anything that reports
the amount payable rather than the full segment grid.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List

from .schemas import Segment


@dataclass
class YearSummary:
    """Arrear totals for segments starting in one calendar year."""

    year: int
    total_due: float = 0
    total_drawn: float = 0
    period_count: int = 0

    @property
    def net_arrear(self) -> float:
        return self.total_due - self.total_drawn


@dataclass
class ArrearSummary:
    """Totals across a full arrear calculation."""

    total_due: float
    total_drawn: float
    segment_count: int
    years: List[YearSummary] = field(default_factory=list)

    @property
    def net_arrear(self) -> float:
        return self.total_due - self.total_drawn

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["net_arrear"] = self.net_arrear
        for year_data, year in zip(data["years"], self.years):
            year_data["net_arrear"] = year.net_arrear
        return data


def total_arrear(segments: Iterable[Segment]) -> float:
    """Sum of (total_due - total_drawn) over all segments."""
    return sum(seg.net_arrear for seg in segments)


def summarize_segments(segments: Iterable[Segment]) -> ArrearSummary:
    """Build totals and a per-year breakdown (by segment start year, ascending)."""
    by_year: Dict[int, YearSummary] = {}
    total_due = 0
    total_drawn = 0
    count = 0

    for seg in segments:
        year = seg.start_date.year
        if year not in by_year:
            by_year[year] = YearSummary(year=year)
        ys = by_year[year]
        ys.total_due += seg.total_due
        ys.total_drawn += seg.total_drawn
        ys.period_count += 1

        total_due += seg.total_due
        total_drawn += seg.total_drawn
        count += 1

    return ArrearSummary(
        total_due=total_due,
        total_drawn=total_drawn,
        segment_count=count,
        years=[by_year[y] for y in sorted(by_year)],
    )
