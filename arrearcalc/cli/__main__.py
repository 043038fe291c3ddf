"""Arrear Calc CLI - Command-line interface for pay arrear calculations."""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from arrearcalc import __version__
from arrearcalc.sdk import (
    DARatesNotFoundError,
    InvalidCaseError,
    calculate_arrears,
    compare_calculations,
    get_setting,
    load_case,
    load_external_totals,
    resolve_da_rates,
    summarize_segments,
)

from .da_rates_commands import da_rates as da_rates_group
from .renderers.segment_renderer import render_comparison, render_segments, render_summary
from .settings_commands import settings as settings_group

INPUT_ERRORS = (FileNotFoundError, InvalidCaseError, DARatesNotFoundError, ValueError)


@click.group()
@click.version_option(version=__version__, prog_name="arrear-calc")
@click.option("--verbose", "-v", is_flag=True, help="Log engine details to stderr.")
def cli(verbose):
    """Arrear Calc - Pay arrears on revised government pay scales.

    Splits the arrear period into segments wherever pay or DA changes,
    prices due (revised) and drawn (pre-revised) pay for each, and totals
    the net arrear payable.

    Configuration is loaded from (in order):

    \b
    1. ARREAR_CALC_CONFIG_PATH environment variable
    2. ~/.config/arrear-calc/settings.json (XDG default)

    Run 'arrear-calc settings show' to see the DA table in use.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(settings_group)
cli.add_command(da_rates_group)


def _output_format(requested: Optional[str]) -> str:
    return requested or get_setting("default_output_format", "text")


def _run_case(case_file: str, da_rates_file: Optional[str]):
    case = load_case(Path(case_file))
    rates = resolve_da_rates(case, Path(da_rates_file) if da_rates_file else None)
    segments = calculate_arrears(case.start_date, case.end_date, case.pay_events, rates)
    return case, segments


@cli.command("calc")
@click.argument("case_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--da-rates", "da_rates_file", type=click.Path(exists=True, dir_okay=False),
              help="DA table YAML (overrides the case's rates and settings)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help="Output format (default: settings default_output_format, else text)")
@click.option("--summary", "summary_only", is_flag=True,
              help="Show only year-wise totals, not the segment grid")
def calc(case_file, da_rates_file, output_format, summary_only):
    """Calculate arrears for a case file.

    CASE_FILE is YAML or JSON with start_date, end_date, pay_events and
    optionally da_rates (see 'arrear-calc da-rates list' for the default
    table).

    \b
    Examples:
      arrear-calc calc case.yaml
      arrear-calc calc case.yaml --summary
      arrear-calc calc case.yaml --format json > segments.json
    """
    try:
        case, segments = _run_case(case_file, da_rates_file)
    except INPUT_ERRORS as e:
        raise click.ClickException(str(e))

    summary = summarize_segments(segments)

    if _output_format(output_format) == "json":
        output = {
            "employee_name": case.employee_name,
            "employee_id": case.employee_id,
            "start_date": case.start_date.isoformat(),
            "end_date": case.end_date.isoformat(),
            "summary": summary.to_dict(),
        }
        if not summary_only:
            output["segments"] = [seg.model_dump(mode="json") for seg in segments]
        click.echo(json.dumps(output, indent=2))
        return

    console = Console()
    who = case.employee_name or case.employee_id or Path(case_file).stem
    title = f"Arrears: {who} ({case.start_date:%d.%m.%Y} - {case.end_date:%d.%m.%Y})"
    if not summary_only:
        render_segments(console, segments, title=title)
    else:
        console.print(f"[bold]{title}[/bold]")
    render_summary(console, summary)


@cli.command("compare")
@click.argument("case_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("external_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--da-rates", "da_rates_file", type=click.Path(exists=True, dir_okay=False),
              help="DA table YAML (overrides the case's rates and settings)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None,
              help="Output format (default: settings default_output_format, else text)")
def compare(case_file, external_file, da_rates_file, output_format):
    """Compare calculated arrears against externally supplied totals.

    EXTERNAL_FILE holds total_due, total_drawn, net_arrear and optional
    per-period breakdowns (matched to segments by position).

    Exits with status 1 when any discrepancy is found.
    """
    try:
        _, segments = _run_case(case_file, da_rates_file)
        external = load_external_totals(Path(external_file))
    except INPUT_ERRORS as e:
        raise click.ClickException(str(e))

    comparison = compare_calculations(segments, external)

    if _output_format(output_format) == "json":
        output = comparison.model_dump(mode="json", exclude={"system_segments"})
        output["segment_count"] = len(segments)
        click.echo(json.dumps(output, indent=2))
    else:
        render_comparison(Console(), comparison)

    if comparison.has_discrepancies:
        raise SystemExit(1)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
