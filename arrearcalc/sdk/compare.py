"""Reconcile engine segments against externally supplied totals.

SDK layer - pure logic. The external side is usually a scanned arrear
sheet whose totals were extracted elsewhere; this module only diffs
numbers and suggests likely causes for each gap.

Tolerances are relative to the system value, not the external one.
Per-period breakdowns are matched to segments by position, so a sheet
that splits periods differently from the engine will misalign.
"""

import logging
from typing import Iterable, List, Optional, Union

from .schemas import CalculationComparison, Discrepancy, ExternalTotals, Segment

logger = logging.getLogger(__name__)

TOTAL_TOLERANCE = 0.01  # 1% of system value for overall totals
PERIOD_TOLERANCE = 0.02  # 2% of system value for per-period arrears
LARGE_GAP = 1000


def percent_difference(system_value: float, external_value: float) -> Optional[float]:
    """(system - external) / external * 100, or None when external is 0."""
    if external_value == 0:
        return None
    return (system_value - external_value) / external_value * 100


def exceeds_tolerance(system_value: float, external_value: float, tolerance: float) -> bool:
    return abs(system_value - external_value) > abs(system_value) * tolerance


def _due_reasons(gap: float) -> List[str]:
    reasons = []
    if gap > LARGE_GAP:
        reasons.append("Missing pay events or incorrect basic pay")
    if gap % 100 < 10:
        reasons.append("Possible rounding difference")
    reasons.append("Different DA rate applied")
    return reasons


def _drawn_reasons(gap: float) -> List[str]:
    reasons = []
    if gap > LARGE_GAP:
        reasons.append("Incorrect drawn basic pay or grade pay")
    reasons.append("Different pre-revised DA rate")
    reasons.append("Missing interim relief component")
    return reasons


def _discrepancy(
    field: str,
    period: str,
    system_value: float,
    external_value: float,
    reasons: List[str],
) -> Discrepancy:
    return Discrepancy(
        field=field,
        period=period,
        system_value=system_value,
        external_value=external_value,
        difference=system_value - external_value,
        percent_diff=percent_difference(system_value, external_value),
        possible_reasons=reasons,
    )


def compare_calculations(
    system_segments: Iterable[Segment],
    external: Union[ExternalTotals, dict],
    total_tolerance: float = TOTAL_TOLERANCE,
    period_tolerance: float = PERIOD_TOLERANCE,
) -> CalculationComparison:
    """Compare engine output against external totals.

    Args:
        system_segments: Segments from calculate_arrears()
        external: Totals (and optional per-period breakdowns) from the sheet
        total_tolerance: Relative tolerance for Total Due/Drawn/Net Arrear
        period_tolerance: Relative tolerance for per-period arrears

    Returns:
        CalculationComparison with discrepancies and summary scores
    """
    segments = list(system_segments)
    if not isinstance(external, ExternalTotals):
        external = ExternalTotals.model_validate(external)

    system_due = sum(seg.total_due for seg in segments)
    system_drawn = sum(seg.total_drawn for seg in segments)
    system_net = system_due - system_drawn

    discrepancies: List[Discrepancy] = []

    if exceeds_tolerance(system_due, external.total_due, total_tolerance):
        gap = abs(system_due - external.total_due)
        discrepancies.append(_discrepancy(
            "Total Due", "Overall", system_due, external.total_due, _due_reasons(gap),
        ))

    if exceeds_tolerance(system_drawn, external.total_drawn, total_tolerance):
        gap = abs(system_drawn - external.total_drawn)
        discrepancies.append(_discrepancy(
            "Total Drawn", "Overall", system_drawn, external.total_drawn, _drawn_reasons(gap),
        ))

    if exceeds_tolerance(system_net, external.net_arrear, total_tolerance):
        discrepancies.append(_discrepancy(
            "Net Arrear", "Overall", system_net, external.net_arrear,
            ["Cascading effect from Due/Drawn differences"],
        ))

    # Positional match: breakdown i against segment i
    for seg, breakdown in zip(segments, external.breakdowns):
        if exceeds_tolerance(seg.net_arrear, breakdown.amount, period_tolerance):
            discrepancies.append(_discrepancy(
                "Period Arrear", breakdown.period, seg.net_arrear, breakdown.amount,
                ["Period-specific calculation error", "Different pro-rata logic"],
            ))

    if len(external.breakdowns) > len(segments):
        logger.warning(
            f"{len(external.breakdowns)} external breakdowns but only {len(segments)} "
            f"segments; extra breakdowns were not compared"
        )

    for d in discrepancies:
        logger.debug(f"discrepancy: {d.field} [{d.period}] system={d.system_value} external={d.external_value}")

    fields_checked = 3 + len(external.breakdowns)
    match_percentage = (fields_checked - len(discrepancies)) / fields_checked * 100

    total_system_value = system_due + system_drawn + system_net
    total_error = sum(abs(d.difference) for d in discrepancies)
    if total_system_value == 0:
        overall_accuracy = 100.0 if not discrepancies else 0.0
    else:
        overall_accuracy = max(0.0, 100 - (total_error / total_system_value) * 100)

    return CalculationComparison(
        system_segments=segments,
        external=external,
        system_total_due=system_due,
        system_total_drawn=system_drawn,
        system_net_arrear=system_net,
        discrepancies=discrepancies,
        overall_accuracy=overall_accuracy,
        match_percentage=match_percentage,
    )
