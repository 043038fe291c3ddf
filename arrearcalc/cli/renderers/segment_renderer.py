"""Rich renderers for arrear segments, comparisons and DA tables.

Transforms SDK output into formatted Rich tables.
"""

from typing import List

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from arrearcalc.sdk.schemas import CalculationComparison, DARate, Segment
from arrearcalc.sdk.summary import ArrearSummary


def render_segments(console: Console, segments: List[Segment], title: str = "Arrear Calculation") -> None:
    """Render the segment grid: period, due columns, drawn columns, net."""
    if not segments:
        console.print(Panel("[yellow]No segments: start date is after end date[/yellow]",
                            title="Note", border_style="yellow"))
        return

    table = Table(title=title, box=box.ROUNDED, show_lines=False)
    table.add_column("Period", style="bold", no_wrap=True)
    table.add_column("Dur", justify="right")
    # Due (revised)
    table.add_column("DA%", justify="right", style="dim")
    table.add_column("Basic", justify="right")
    table.add_column("DA", justify="right")
    table.add_column("Due", justify="right", style="bold")
    # Drawn (pre-revised)
    table.add_column("DA%", justify="right", style="dim")
    table.add_column("Basic", justify="right")
    table.add_column("G.Pay", justify="right")
    table.add_column("IR", justify="right")
    table.add_column("DA", justify="right")
    table.add_column("Drawn", justify="right", style="bold")
    table.add_column("Net", justify="right")

    for seg in segments:
        net = seg.net_arrear
        net_style = "green" if net >= 0 else "red"
        table.add_row(
            seg.period_label,
            seg.duration_label,
            _pct(seg.da_percentage),
            _fmt(seg.basic_pay),
            _fmt(seg.da_amount),
            _fmt(seg.total_due),
            _pct(seg.drawn_da_percentage),
            _fmt(seg.drawn_basic_pay),
            _fmt(seg.drawn_grade_pay),
            _fmt(seg.drawn_ir),
            _fmt(seg.drawn_da_amount),
            _fmt(seg.total_drawn),
            f"[{net_style}]{_fmt(net)}[/{net_style}]",
        )

    console.print(table)


def render_summary(console: Console, summary: ArrearSummary) -> None:
    """Render year-wise totals and the grand total payable."""
    table = Table(title="Year-wise Summary", box=box.SIMPLE)
    table.add_column("Year", style="bold")
    table.add_column("Periods", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("Drawn", justify="right")
    table.add_column("Net Arrear", justify="right", style="bold")

    for year in summary.years:
        table.add_row(
            str(year.year),
            str(year.period_count),
            _fmt(year.total_due),
            _fmt(year.total_drawn),
            _fmt(year.net_arrear),
        )

    table.add_row("", "", "", "", "")
    table.add_row(
        "[bold]Total[/bold]",
        str(summary.segment_count),
        _fmt(summary.total_due),
        _fmt(summary.total_drawn),
        f"[bold green]{_fmt(summary.net_arrear)}[/bold green]",
    )
    console.print(table)


def render_comparison(console: Console, comparison: CalculationComparison) -> None:
    """Render system vs external totals and any discrepancies."""
    ext = comparison.external

    totals = Table(title="System vs External", box=box.ROUNDED)
    totals.add_column("Field", style="cyan")
    totals.add_column("System", justify="right")
    totals.add_column("External", justify="right")
    totals.add_column("Diff", justify="right")
    for label, system_value, external_value in (
        ("Total Due", comparison.system_total_due, ext.total_due),
        ("Total Drawn", comparison.system_total_drawn, ext.total_drawn),
        ("Net Arrear", comparison.system_net_arrear, ext.net_arrear),
    ):
        totals.add_row(label, _fmt(system_value), _fmt(external_value), _fmt(system_value - external_value))
    console.print(totals)

    if not comparison.has_discrepancies:
        console.print("\n✓ All values within tolerance", style="bold green")
    else:
        table = Table(title="Discrepancies", box=box.ROUNDED, header_style="bold red")
        table.add_column("Field", style="cyan")
        table.add_column("Period")
        table.add_column("System", justify="right")
        table.add_column("External", justify="right")
        table.add_column("Diff", justify="right")
        table.add_column("% Diff", justify="right")
        table.add_column("Possible reasons")

        for d in comparison.discrepancies:
            pct = "n/a" if d.percent_diff is None else f"{d.percent_diff:+.2f}%"
            table.add_row(
                d.field,
                d.period,
                _fmt(d.system_value),
                _fmt(d.external_value),
                f"[red]{_fmt(d.difference)}[/red]",
                pct,
                "\n".join(d.possible_reasons),
            )
        console.print(table)

    console.print(
        f"Match: {comparison.match_percentage:.1f}%   "
        f"Accuracy: {comparison.overall_accuracy:.2f}%"
    )


def render_da_rates(console: Console, rates: List[DARate]) -> None:
    """Render DA rates grouped by track, oldest first."""
    table = Table(title="Dearness Allowance Rates", box=box.ROUNDED)
    table.add_column("Track", style="cyan")
    table.add_column("Effective", no_wrap=True)
    table.add_column("DA%", justify="right")

    ordered = sorted(rates, key=lambda r: (r.type != "REVISED", r.effective_date))
    for rate in ordered:
        table.add_row(rate.type, f"{rate.effective_date:%d.%m.%Y}", _pct(rate.percentage))
    console.print(table)


def _fmt(amount: float | None) -> str:
    """Format rupee amount."""
    if amount is None:
        return "-"
    if float(amount).is_integer():
        return f"{amount:,.0f}"
    return f"{amount:,.2f}"


def _pct(value: float) -> str:
    if float(value).is_integer():
        return f"{value:.0f}%"
    return f"{value:g}%"
