"""Pydantic schemas for arrear calculation inputs and outputs.

All schemas use extra='forbid' to reject unknown fields, ensuring
typos in case files cause clear errors rather than silent ignoring.
Inputs and segments are frozen: a pay change is expressed by adding a
later event, never by mutating an existing one.
"""

import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .dates import parse_date


REVISED = "REVISED"
PRE_REVISED = "PRE_REVISED"

DATrack = Literal["REVISED", "PRE_REVISED"]


# =============================================================================
# Inputs - pay events and DA rates
# =============================================================================


class PayEvent(BaseModel):
    """A point-in-time change to an employee's pay basis.

    Effective from `date` (inclusive) until the next event takes over.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    date: datetime.date = Field(..., description="Date the change takes effect (inclusive)")
    basic_pay: float = Field(
        ..., ge=0, allow_inf_nan=False,
        description="Revised-scale (due) basic pay from this date onward",
    )
    type: str = Field(
        default="CHANGE",
        description="Free-form label (INITIAL, INCREMENT, PROMOTION...). Informational only.",
    )
    drawn_basic_pay: float = Field(
        default=0, ge=0, allow_inf_nan=False,
        description="Pre-revised (drawn) basic pay",
    )
    drawn_grade_pay: float = Field(
        default=0, ge=0, allow_inf_nan=False,
        description="Pre-revised grade pay",
    )
    drawn_ir: float = Field(
        default=0, ge=0, allow_inf_nan=False,
        description="Interim relief paid on the pre-revised scale",
    )

    @field_validator("date", mode="before")
    @classmethod
    def parse_sheet_date(cls, value):
        return parse_date(value)

    @field_validator("drawn_basic_pay", "drawn_grade_pay", "drawn_ir", mode="before")
    @classmethod
    def missing_component_is_zero(cls, value):
        return 0 if value is None else value

    @property
    def drawn_base(self) -> float:
        """Old-scale amount DA is applied to: basic + grade pay + IR."""
        return self.drawn_basic_pay + self.drawn_grade_pay + self.drawn_ir


class DARate(BaseModel):
    """A Dearness Allowance percentage effective from a date, on one track."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    effective_date: datetime.date = Field(..., description="Date the percentage applies from (inclusive)")
    percentage: float = Field(..., allow_inf_nan=False, description="DA percent (e.g. 17 for 17%)")
    type: DATrack = Field(
        default=REVISED,
        description="REVISED applies to the due track, PRE_REVISED to the drawn track",
    )

    @field_validator("effective_date", mode="before")
    @classmethod
    def parse_sheet_date(cls, value):
        return parse_date(value)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_track(cls, value):
        if value is None:
            return REVISED
        if isinstance(value, str):
            return value.strip().upper().replace("-", "_")
        return value


# =============================================================================
# Engine output
# =============================================================================


class Segment(BaseModel):
    """Contiguous inclusive date range over which every calculation input is constant."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: datetime.date
    end_date: datetime.date
    days: int = Field(..., ge=1, description="Inclusive day count")

    # Due (revised scale)
    basic_pay: float
    da_percentage: float
    da_amount: int = Field(..., description="Monthly due DA, rounded")
    monthly_due_total: float
    total_due: float = Field(..., description="Due for this segment (prorated unless full month)")

    # Drawn (pre-revised scale)
    drawn_basic_pay: float
    drawn_grade_pay: float
    drawn_ir: float
    drawn_da_percentage: float
    drawn_da_amount: int = Field(..., description="Monthly drawn DA, rounded")
    monthly_drawn_total: float
    total_drawn: float = Field(..., description="Drawn for this segment (prorated unless full month)")

    duration_label: str = Field(..., description="'1 M' for a full month, else '<days> D'")
    is_full_month: bool

    @computed_field
    @property
    def net_arrear(self) -> float:
        """Arrear owed for this segment: due minus drawn."""
        return self.total_due - self.total_drawn

    @property
    def period_label(self) -> str:
        return f"{self.start_date:%d.%m.%y} - {self.end_date:%d.%m.%y}"


# =============================================================================
# Comparison against externally supplied totals
# =============================================================================


class PeriodBreakdown(BaseModel):
    """Net arrear reported by an external source for one period."""

    model_config = ConfigDict(extra="forbid")

    period: str = Field(..., description="Period label as printed in the source")
    amount: float = Field(..., allow_inf_nan=False)


class ExternalTotals(BaseModel):
    """Totals extracted from an external sheet (typically OCR output)."""

    model_config = ConfigDict(extra="forbid")

    total_due: float = Field(..., allow_inf_nan=False)
    total_drawn: float = Field(..., allow_inf_nan=False)
    net_arrear: float = Field(..., allow_inf_nan=False)
    breakdowns: List[PeriodBreakdown] = Field(default_factory=list)


class Discrepancy(BaseModel):
    """One field where system and external values disagree beyond tolerance."""

    model_config = ConfigDict(extra="forbid")

    field: str
    period: str
    system_value: float
    external_value: float
    difference: float = Field(..., description="system - external")
    percent_diff: Optional[float] = Field(
        default=None,
        description="difference / external * 100; None when the external value is 0",
    )
    possible_reasons: List[str] = Field(default_factory=list)


class CalculationComparison(BaseModel):
    """Reconciliation of engine segments against external totals."""

    model_config = ConfigDict(extra="forbid")

    system_segments: List[Segment]
    external: ExternalTotals
    system_total_due: float
    system_total_drawn: float
    system_net_arrear: float
    discrepancies: List[Discrepancy] = Field(default_factory=list)
    overall_accuracy: float
    match_percentage: float

    @property
    def has_discrepancies(self) -> bool:
        return len(self.discrepancies) > 0
