"""Arrear case files.

A case file (YAML or JSON) holds everything one calculation needs:

    employee_name: R. Kumar
    employee_id: E-1042
    start_date: 2016-01-01
    end_date: 2021-06-30
    pay_events:
      - {date: 2016-01-01, type: INITIAL, basic_pay: 49500,
         drawn_basic_pay: 14680, drawn_grade_pay: 4300, drawn_ir: 949}
    da_rates:            # optional; defaults to the configured DA table
      - {effective_date: 2016-01-01, percentage: 0, type: REVISED}

External totals files carry total_due, total_drawn, net_arrear and an
optional breakdowns list of {period, amount}.
"""

import datetime
import json
from pathlib import Path
from typing import Any, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import load_da_rates, parse_da_table
from .dates import parse_date
from .schemas import DARate, ExternalTotals, PayEvent


class InvalidCaseError(Exception):
    """Raised when a case or external totals file cannot be used."""
    pass


class ArrearCase(BaseModel):
    """Inputs for one employee's arrear calculation."""

    model_config = ConfigDict(extra="forbid")

    employee_name: Optional[str] = None
    employee_id: Optional[str] = None
    start_date: datetime.date = Field(..., description="First day of the arrear period")
    end_date: datetime.date = Field(..., description="Last day of the arrear period (inclusive)")
    pay_events: List[PayEvent] = Field(default_factory=list)
    da_rates: Optional[List[DARate]] = Field(
        default=None,
        description="Case-specific DA rates; None uses the configured DA table",
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_sheet_date(cls, value):
        return parse_date(value)


def read_structured_file(path: Path) -> Any:
    """Read a YAML or JSON file (by extension; anything else parsed as YAML)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path, "r") as f:
        if path.suffix.lower() == ".json":
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidCaseError(f"{path.name}: invalid JSON: {e}")
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise InvalidCaseError(f"{path.name}: invalid YAML: {e}")


def _format_validation_error(path: Path, error: ValidationError) -> str:
    lines = [f"{path.name}: {error.error_count()} validation error(s)"]
    for err in error.errors():
        loc = ".".join(str(part) for part in err["loc"])
        lines.append(f"  - {loc}: {err['msg']}")
    return "\n".join(lines)


def load_case(path: Path) -> ArrearCase:
    """Load and validate a case file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidCaseError: If the file can't be parsed or fails validation
    """
    path = Path(path)
    data = read_structured_file(path)
    if not isinstance(data, dict):
        raise InvalidCaseError(f"{path.name}: expected a mapping at top level")

    # DA rates in a case may use the track-keyed table layout too
    if isinstance(data.get("da_rates"), dict):
        try:
            data = {**data, "da_rates": parse_da_table(data["da_rates"])}
        except ValueError as e:
            raise InvalidCaseError(f"{path.name}: da_rates: {e}")

    try:
        return ArrearCase.model_validate(data)
    except ValidationError as e:
        raise InvalidCaseError(_format_validation_error(path, e))


def load_external_totals(path: Path) -> ExternalTotals:
    """Load externally supplied totals (e.g. extracted from a scanned sheet).

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidCaseError: If the file can't be parsed or fails validation
    """
    path = Path(path)
    data = read_structured_file(path)
    try:
        return ExternalTotals.model_validate(data)
    except ValidationError as e:
        raise InvalidCaseError(_format_validation_error(path, e))


def resolve_da_rates(case: ArrearCase, da_rates_path: Optional[Path] = None) -> List[DARate]:
    """DA rates for a case: an explicit table path wins, then the case's own
    rates, then the configured/bundled table."""
    if da_rates_path is not None:
        return load_da_rates(da_rates_path)
    if case.da_rates is not None:
        return list(case.da_rates)
    return load_da_rates()
