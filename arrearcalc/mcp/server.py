"""Arrear Calc MCP Server - FastMCP implementation for arrear tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from arrearcalc.sdk import (
    calculate_arrears as sdk_calculate_arrears,
    compare_calculations as sdk_compare_calculations,
    get_da_rates_path,
    load_da_rates,
    summarize_segments,
)

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("arrear-calc")


def _rates_or_default(da_rates: list[dict] | None) -> list:
    if da_rates is not None:
        return da_rates
    return load_da_rates()


# --- Tools ---

@mcp.tool()
async def calculate_arrears(
    start_date: str = Field(description="First day of the arrear period (YYYY-MM-DD)"),
    end_date: str = Field(description="Last day of the arrear period, inclusive (YYYY-MM-DD)"),
    pay_events: list[dict] = Field(description=(
        "Pay events: {date, basic_pay, type?, drawn_basic_pay?, drawn_grade_pay?, drawn_ir?}. "
        "Each applies from its date until the next event."
    )),
    da_rates: list[dict] | None = Field(default=None, description=(
        "DA rates: {effective_date, percentage, type: REVISED|PRE_REVISED}. "
        "Omit to use the configured DA table."
    )),
    include_segments: bool = Field(default=True, description="Include the per-segment grid in the result"),
) -> dict[str, Any]:
    """Calculate pay arrears (due on revised scale minus drawn on pre-revised scale).

    Returns year-wise totals, the net arrear payable and, unless disabled,
    every segment with its due/drawn breakdown.
    """
    try:
        segments = sdk_calculate_arrears(
            start_date, end_date, pay_events, _rates_or_default(da_rates),
        )
        result: dict[str, Any] = {
            "summary": summarize_segments(segments).to_dict(),
            "segment_count": len(segments),
        }
        if include_segments:
            result["segments"] = [seg.model_dump(mode="json") for seg in segments]
        return result

    except Exception as e:
        logger.error(f"Error calculating arrears: {e}")
        return {"error": str(e), "segments": []}


@mcp.tool()
async def compare_calculations(
    start_date: str = Field(description="First day of the arrear period (YYYY-MM-DD)"),
    end_date: str = Field(description="Last day of the arrear period, inclusive (YYYY-MM-DD)"),
    pay_events: list[dict] = Field(description="Pay events, as for calculate_arrears"),
    external: dict = Field(description=(
        "Externally supplied totals: {total_due, total_drawn, net_arrear, "
        "breakdowns?: [{period, amount}]}"
    )),
    da_rates: list[dict] | None = Field(default=None, description="DA rates; omit for the configured table"),
) -> dict[str, Any]:
    """Recalculate arrears and compare them with totals from an external sheet.

    Flags totals that differ by more than 1% (2% per period) and lists
    likely causes for each discrepancy.
    """
    try:
        segments = sdk_calculate_arrears(
            start_date, end_date, pay_events, _rates_or_default(da_rates),
        )
        comparison = sdk_compare_calculations(segments, external)
        output = comparison.model_dump(mode="json", exclude={"system_segments"})
        output["segment_count"] = len(segments)
        return output

    except Exception as e:
        logger.error(f"Error comparing calculations: {e}")
        return {"error": str(e), "discrepancies": []}


@mcp.tool()
async def list_da_rates(
    track: str | None = Field(default=None, description="REVISED or PRE_REVISED; omit for both"),
) -> dict[str, Any]:
    """List the configured Dearness Allowance table."""
    try:
        rates = load_da_rates()
        if track:
            wanted = track.strip().upper()
            rates = [r for r in rates if r.type == wanted]
        rates = sorted(rates, key=lambda r: (r.type, r.effective_date))
        return {
            "source": str(get_da_rates_path()),
            "rates": [r.model_dump(mode="json") for r in rates],
            "count": len(rates),
        }

    except Exception as e:
        logger.error(f"Error listing DA rates: {e}")
        return {"error": str(e), "rates": [], "count": 0}


# --- Resources (optional, for browsing) ---

@mcp.resource("arrearcalc://da-rates")
async def da_rates_resource() -> str:
    """The configured DA table as JSON."""
    try:
        rates = load_da_rates()
        return json.dumps([r.model_dump(mode="json") for r in rates], indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
