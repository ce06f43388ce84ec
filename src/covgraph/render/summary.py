from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from decimal import Decimal

    from covgraph.model.analysis import ParserResult


def _style_percent(pct: Decimal | None, green: float, yellow: float) -> str:
    if pct is None:
        return "n/a"
    if pct >= green:
        return f"[green]{pct}%[/green]"
    if pct >= yellow:
        return f"[yellow]{pct}%[/yellow]"
    return f"[red]{pct}%[/red]"


def render_summary(
    result: ParserResult,
    *,
    color: bool = True,
    green: float = 90.0,
    yellow: float = 75.0,
    width: int | None = None,
) -> str:
    """Render one row per class, grouped by assembly, plus a total row."""
    table = Table(title="Coverage Summary", box=box.SIMPLE_HEAVY, header_style="bold", expand=True)

    table.add_column("Assembly", overflow="fold")
    table.add_column("Class", overflow="fold")
    table.add_column("Files", justify="right")
    table.add_column("Lines\nCov.", justify="right")
    table.add_column("Lines\nTot.", justify="right")
    table.add_column("Line\nQuota", justify="right")
    table.add_column("Branch\nCov.", justify="right")
    table.add_column("Branch\nTot.", justify="right")
    table.add_column("Branch\nQuota", justify="right")

    for assembly in result.assemblies:
        for idx, cls in enumerate(assembly.classes):
            table.add_row(
                assembly.name if idx == 0 else "",
                cls.name,
                str(len(cls.files)),
                str(cls.covered_lines),
                str(cls.coverable_lines),
                _style_percent(cls.coverage_quota, green, yellow),
                str(cls.covered_branches),
                str(cls.total_branches),
                _style_percent(cls.branch_coverage_quota, green, yellow),
            )
        if assembly.classes:
            table.add_section()

    table.add_row(
        "[bold]Total[/bold]",
        "",
        "",
        str(result.covered_lines),
        str(result.coverable_lines),
        _style_percent(result.coverage_quota, green, yellow),
        str(result.covered_branches),
        str(result.total_branches),
        _style_percent(result.branch_coverage_quota, green, yellow),
    )

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=width)
    console.print(table)
    return buf.getvalue().rstrip()


__all__ = ["render_summary"]
