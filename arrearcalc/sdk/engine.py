"""Arrear segmentation and proration engine.

SDK layer - pure logic, no I/O. Splits a date range into segments at
every point where an input changes (pay event, DA rate on either track,
calendar month start), then prices each segment on both scales:

    due   = basic + round(basic * revised DA%)
    drawn = (basic + grade pay + IR) + round(same base * pre-revised DA%)

A segment covering a whole calendar month takes the monthly totals as-is.
Anything shorter is prorated by days / days-in-month, rounding due and
drawn independently. Historical sheets round this way, so the per-segment
rounding is kept even though it drifts slightly from an exact pro-rata.
"""

import logging
import math
from datetime import date, timedelta
from typing import Any, Iterable, List, Optional, Tuple, Union

from .dates import (
    DateLike,
    days_in_month,
    inclusive_days,
    is_full_month,
    next_month_start,
    parse_date,
)
from .schemas import PRE_REVISED, DARate, PayEvent, Segment
from .timeline import Timeline

logger = logging.getLogger(__name__)

FULL_MONTH_LABEL = "1 M"

PayEventInput = Union[PayEvent, dict]
DARateInput = Union[DARate, dict]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (5.5 -> 6, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def _coerce(items: Optional[Iterable[Any]], model) -> list:
    if items is None:
        return []
    return [item if isinstance(item, model) else model.model_validate(item) for item in items]


def split_da_rates(da_rates: Iterable[DARate]) -> Tuple[Timeline[DARate], Timeline[DARate]]:
    """Split DA rates into (revised, pre_revised) timelines."""
    rates = list(da_rates)
    revised = Timeline((r for r in rates if r.type != PRE_REVISED), key=lambda r: r.effective_date)
    pre_revised = Timeline((r for r in rates if r.type == PRE_REVISED), key=lambda r: r.effective_date)
    return revised, pre_revised


def collect_boundaries(
    start_date: DateLike,
    end_date: DateLike,
    pay_events: Iterable[PayEventInput],
    da_rates: Iterable[DARateInput],
) -> List[date]:
    """Sorted segment boundaries for [start_date, end_date].

    Includes start_date, the day after end_date (exclusive fence), each
    month start inside the range, and each pay event / DA change strictly
    after start_date and on or before end_date. Consecutive pairs delimit
    segments. Returns [] when start_date is after end_date.
    """
    start = parse_date(start_date)
    end = parse_date(end_date)
    if start > end:
        return []

    fence = end + timedelta(days=1)
    boundaries = {start, fence}

    cursor = start if start.day == 1 else next_month_start(start)
    while cursor < fence:
        boundaries.add(cursor)
        cursor = next_month_start(cursor)

    events = Timeline(_coerce(pay_events, PayEvent), key=lambda e: e.date)
    rates = Timeline(_coerce(da_rates, DARate), key=lambda r: r.effective_date)
    boundaries.update(events.change_dates_within(start, end))
    boundaries.update(rates.change_dates_within(start, end))

    return sorted(boundaries)


def _price_segment(
    seg_start: date,
    seg_end: date,
    event: Optional[PayEvent],
    revised_rate: Optional[DARate],
    pre_revised_rate: Optional[DARate],
) -> Segment:
    basic_pay = event.basic_pay if event else 0
    drawn_bp = event.drawn_basic_pay if event else 0
    drawn_gp = event.drawn_grade_pay if event else 0
    drawn_ir = event.drawn_ir if event else 0
    rev_pct = revised_rate.percentage if revised_rate else 0
    pre_pct = pre_revised_rate.percentage if pre_revised_rate else 0

    # Due
    due_da = round_half_up(basic_pay * (rev_pct / 100))
    monthly_due = basic_pay + due_da

    # Drawn
    drawn_base = event.drawn_base if event else 0
    drawn_da = round_half_up(drawn_base * (pre_pct / 100))
    monthly_drawn = drawn_base + drawn_da

    days = inclusive_days(seg_start, seg_end)
    full_month = is_full_month(seg_start, seg_end)

    if full_month:
        total_due = monthly_due
        total_drawn = monthly_drawn
        label = FULL_MONTH_LABEL
    else:
        factor = days / days_in_month(seg_start)
        total_due = round_half_up(monthly_due * factor)
        total_drawn = round_half_up(monthly_drawn * factor)
        label = f"{days} D"

    return Segment(
        start_date=seg_start,
        end_date=seg_end,
        days=days,
        basic_pay=basic_pay,
        da_percentage=rev_pct,
        da_amount=due_da,
        monthly_due_total=monthly_due,
        total_due=total_due,
        drawn_basic_pay=drawn_bp,
        drawn_grade_pay=drawn_gp,
        drawn_ir=drawn_ir,
        drawn_da_percentage=pre_pct,
        drawn_da_amount=drawn_da,
        monthly_drawn_total=monthly_drawn,
        total_drawn=total_drawn,
        duration_label=label,
        is_full_month=full_month,
    )


def calculate_arrears(
    start_date: DateLike,
    end_date: DateLike,
    pay_events: Iterable[PayEventInput],
    da_rates: Iterable[DARateInput],
) -> List[Segment]:
    """Compute arrear segments covering [start_date, end_date] inclusive.

    Args:
        start_date: First day of the arrear period
        end_date: Last day of the arrear period (inclusive)
        pay_events: PayEvent models or dicts, in any order
        da_rates: DARate models or dicts for both tracks, in any order

    Returns:
        Segments in ascending date order with no gaps or overlaps.
        Empty when start_date is after end_date.

    Raises:
        ValueError: If a date cannot be parsed or an event/rate is invalid
            (e.g. negative or non-finite basic pay)
    """
    start = parse_date(start_date)
    end = parse_date(end_date)

    # Validate everything up front so a bad row never yields a partial result
    events = _coerce(pay_events, PayEvent)
    rates = _coerce(da_rates, DARate)

    if start > end:
        logger.warning(f"start_date {start} is after end_date {end}; no segments")
        return []

    boundaries = collect_boundaries(start, end, events, rates)
    event_timeline = Timeline(events, key=lambda e: e.date)
    revised, pre_revised = split_da_rates(rates)

    logger.debug(
        f"calculate_arrears: {start} to {end}, {len(events)} pay events, "
        f"{len(revised)} revised / {len(pre_revised)} pre-revised DA rates, "
        f"{len(boundaries)} boundaries"
    )

    segments = []
    for seg_start, next_boundary in zip(boundaries, boundaries[1:]):
        seg_end = next_boundary - timedelta(days=1)
        segments.append(_price_segment(
            seg_start,
            seg_end,
            event_timeline.active_as_of(seg_start),
            revised.active_as_of(seg_start),
            pre_revised.active_as_of(seg_start),
        ))

    if event_timeline.active_as_of(start) is None:
        logger.debug(f"No pay event on or before {start}; leading segments carry zero pay")

    return segments
