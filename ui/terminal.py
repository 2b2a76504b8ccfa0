"""
Terminal report using Rich
Displays the profitable triads found by one monitor run
"""
from decimal import Decimal
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from core.triad_monitor import MonitorResult
from utils.logger import console as default_console


def fmt_significant(value: Decimal, digits: int = 4) -> str:
    """Value rounded to `digits` significant digits"""
    if value == 0:
        return "0"
    exponent = value.adjusted() - digits + 1
    return f"{value.scaleb(-exponent).quantize(Decimal(1)).scaleb(exponent).normalize():f}"


def create_opportunities_table(result: MonitorResult, limit: int = 50) -> Table:
    """Create opportunities table"""
    table = Table(
        title=f"🏆 PROFITABLE TRIADS FOUND ({len(result.opportunities)})",
        show_header=True,
        header_style="bold magenta",
        border_style="dim"
    )

    table.add_column("#", style="dim", width=3)
    table.add_column("Route", style="cyan")
    table.add_column("Start", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Profit", justify="right")
    table.add_column("Profit %", justify="right")
    table.add_column("Pools", style="dim")

    for i, opp in enumerate(result.opportunities[:limit], 1):
        profit_style = "bold green" if opp.profit_pct >= 1 else "green"
        table.add_row(
            str(i),
            opp.description,
            f"{opp.start_amount} {opp.start_token}",
            fmt_significant(opp.final_amount, 8),
            Text(fmt_significant(opp.profit), style=profit_style),
            Text(f"{fmt_significant(opp.profit_pct)}%", style=profit_style),
            ", ".join(opp.pool_labels),
        )

    return table


def render_report(result: MonitorResult, console: Optional[Console] = None):
    """Print the monitor result"""
    console = console or default_console

    console.print(
        f"[dim]Routes checked: {result.routes_checked:,} | "
        f"Pools priced: {result.pools_priced}/{result.pools_fetched} | "
        f"Fetch: {result.fetch_ms:.0f}ms[/dim]"
    )

    if not result.opportunities:
        console.print("[yellow]😔 No profitable triads found above the minimum threshold.[/yellow]")
        return

    console.print(create_opportunities_table(result))
