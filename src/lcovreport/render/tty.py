from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.table import Table

from lcovreport.model.metrics import pct

if TYPE_CHECKING:
    from lcovreport.model.records import CoverageCounter
    from lcovreport.model.types import Minimum
    from lcovreport.pipeline import ReportResult


def _style_percent(counter: CoverageCounter, minimum: Minimum) -> str:
    if counter.found == 0:
        return "n/a"
    value = pct(counter.hit, counter.found)
    text = f"{value:.1f}%"
    if minimum is None:
        return text
    if value >= minimum:
        return f"[green]{text}[/green]"
    return f"[red]{text}[/red]"


def render_tty_summary(result: ReportResult, *, color: bool = True) -> str:
    """Render a Rich table of the changed files, or of all files when none changed."""
    if result.changed_records:
        records = result.changed_records
        minimum = result.changed_files_minimum
        title = "Changed Files"
    else:
        records = result.records
        minimum = None
        title = "All Files"

    table = Table(title=title, box=box.SIMPLE_HEAVY, header_style="bold", expand=True)
    table.add_column("File", overflow="fold")
    table.add_column("Lines", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Branches", justify="right")

    for r in records:
        table.add_row(
            r.basename,
            _style_percent(r.lines, minimum),
            _style_percent(r.functions, None),
            _style_percent(r.branches, None),
        )

    verdict = "[bold green]PASSED[/bold green]" if result.passed else "[bold red]FAILED[/bold red]"

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color)
    console.print()
    console.print(table)
    console.print(f"Coverage check: {verdict}")
    return buf.getvalue().rstrip()


__all__ = ["render_tty_summary"]
