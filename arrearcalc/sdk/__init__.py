"""Arrear Calc SDK - Core functionality for pay arrear calculations."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_da_rates_path,
    load_da_rates,
    parse_da_table,
    DARatesNotFoundError,
)

from .schemas import (
    REVISED,
    PRE_REVISED,
    PayEvent,
    DARate,
    Segment,
    PeriodBreakdown,
    ExternalTotals,
    Discrepancy,
    CalculationComparison,
)

from .timeline import Timeline

from .engine import (
    calculate_arrears,
    collect_boundaries,
    split_da_rates,
    round_half_up,
)

from .compare import (
    compare_calculations,
    percent_difference,
    TOTAL_TOLERANCE,
    PERIOD_TOLERANCE,
)

from .summary import (
    ArrearSummary,
    YearSummary,
    summarize_segments,
    total_arrear,
)

from .cases import (
    ArrearCase,
    InvalidCaseError,
    load_case,
    load_external_totals,
    resolve_da_rates,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_da_rates_path",
    "load_da_rates",
    "parse_da_table",
    "DARatesNotFoundError",
    # Schemas
    "REVISED",
    "PRE_REVISED",
    "PayEvent",
    "DARate",
    "Segment",
    "PeriodBreakdown",
    "ExternalTotals",
    "Discrepancy",
    "CalculationComparison",
    # Engine
    "Timeline",
    "calculate_arrears",
    "collect_boundaries",
    "split_da_rates",
    "round_half_up",
    # Comparison
    "compare_calculations",
    "percent_difference",
    "TOTAL_TOLERANCE",
    "PERIOD_TOLERANCE",
    # Summary
    "ArrearSummary",
    "YearSummary",
    "summarize_segments",
    "total_arrear",
    # Case files
    "ArrearCase",
    "InvalidCaseError",
    "load_case",
    "load_external_totals",
    "resolve_da_rates",
]
