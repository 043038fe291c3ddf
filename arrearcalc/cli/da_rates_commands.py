"""DA table commands."""

import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from arrearcalc.sdk import DARatesNotFoundError, get_da_rates_path, load_da_rates
from arrearcalc.sdk.schemas import PRE_REVISED, REVISED

from .renderers.segment_renderer import render_da_rates

TRACK_CHOICES = {"revised": REVISED, "pre_revised": PRE_REVISED}


@click.group("da-rates")
def da_rates():
    """Inspect Dearness Allowance tables."""
    pass


@da_rates.command("list")
@click.option("--track", type=click.Choice(list(TRACK_CHOICES)), help="Show only one track.")
@click.option("--file", "da_file", type=click.Path(exists=True, dir_okay=False),
              help="DA table YAML (default: configured or bundled table)")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]),
              default="text", help="Output format.")
def da_rates_list(track: Optional[str], da_file: Optional[str], output_format: str):
    """List DA rates in effect-date order.

    \b
    Examples:
      arrear-calc da-rates list
      arrear-calc da-rates list --track pre_revised
      arrear-calc da-rates list --file my_rates.yaml --format json
    """
    path = Path(da_file) if da_file else None
    try:
        rates = load_da_rates(path)
    except (DARatesNotFoundError, ValueError) as e:
        raise click.ClickException(str(e))

    if track:
        rates = [r for r in rates if r.type == TRACK_CHOICES[track]]
    rates = sorted(rates, key=lambda r: (r.type != REVISED, r.effective_date))

    if output_format == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in rates], indent=2))
        return

    click.echo(f"Source: {get_da_rates_path(path)}")
    render_da_rates(Console(), rates)
