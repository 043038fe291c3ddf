"""Settings CLI commands for Arrear Calc.

Manages settings.json - DA table path, preferences.
"""

import click
from pathlib import Path

from arrearcalc.sdk import (
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_settings_path,
    get_da_rates_path,
    DARatesNotFoundError,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - da_rates: path to a DA table YAML (default: bundled table)
    - default_output_format: text or json
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and their values."""
    settings_path = get_settings_path()
    current = load_settings()

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
    else:
        click.echo("Current settings:")
        for key, value in current.items():
            click.echo(f"  {key}: {value}")

    click.echo()
    click.echo("Effective paths:")
    try:
        click.echo(f"  da_rates: {get_da_rates_path()}")
    except DARatesNotFoundError as e:
        click.echo(f"  da_rates: {click.style('missing', fg='red')} ({e.args[0].splitlines()[0]})")


@settings.command("da-rates")
@click.argument("path", required=False, type=click.Path())
@click.option("--clear", is_flag=True, help="Clear custom da_rates, revert to the bundled table")
def settings_da_rates(path, clear):
    """Set or clear the DA table used when a case has no rates of its own.

    PATH is a YAML file with 'revised' and 'pre_revised' lists of
    {effective_date, percentage} entries.

    Examples:
        arrear-calc settings da-rates ~/arrears/da_rates_2024.yaml
        arrear-calc settings da-rates --clear
    """
    if clear:
        current = load_settings()
        if "da_rates" in current:
            del current["da_rates"]
            save_settings(current)
            click.echo("Cleared da_rates setting.")
            click.echo(f"DA table is now: {get_da_rates_path()} (bundled)")
        else:
            click.echo("da_rates was not set.")
        return

    if not path:
        configured = get_setting("da_rates")
        if configured:
            click.echo(f"Current da_rates: {configured}")
        else:
            click.echo(f"No custom da_rates set. Using bundled table: {get_da_rates_path()}")
        return

    da_path = Path(path).expanduser().resolve()
    if not da_path.is_file():
        raise click.ClickException(f"DA table file not found: {da_path}")

    set_setting("da_rates", str(da_path))
    click.echo(f"Set da_rates: {da_path}")
    click.echo(f"Saved to: {get_settings_path()}")


@settings.command("output-format")
@click.argument("fmt", required=False, type=click.Choice(["text", "json"]))
def settings_output_format(fmt):
    """Show or set the default output format for calc/compare."""
    if not fmt:
        click.echo(f"default_output_format: {get_setting('default_output_format', 'text')}")
        return
    set_setting("default_output_format", fmt)
    click.echo(f"Set default_output_format: {fmt}")
