"""Rich tables for the console summary."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich import box
from rich.table import Table

if TYPE_CHECKING:
    from report.summary import RunSummary


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f} ms"
    return f"{seconds:.2f} s"


def _result_cell(passed: bool) -> str:
    return "[green]Pass[/green]" if passed else "[bold red]Fail[/bold red]"


def summary_table(summary: RunSummary) -> Table:
    table = Table(title=f"Patch validation: {summary.patch_name}", box=box.ROUNDED)
    table.add_column("Result")
    table.add_column("Source")
    table.add_column("Naming", justify="right")
    table.add_column("Reference", justify="right")
    table.add_column("Overwrite", justify="right")
    table.add_column("Symbols", justify="right")
    table.add_column("Duration", justify="right")

    for row in summary.units:
        table.add_row(
            _result_cell(row.passed),
            row.filename,
            str(row.naming_violations),
            str(row.reference_violations),
            str(row.overwrite_violations),
            str(row.num_symbols),
            format_duration(row.duration),
        )
    return table


def resource_table(summary: RunSummary) -> Table:
    table = Table(title="Resources", box=box.ROUNDED)
    table.add_column("Result")
    table.add_column("Category")
    table.add_column("Extension", justify="right")
    table.add_column("Naming", justify="right")
    table.add_column("Files", justify="right")
    table.add_column("Duration", justify="right")

    for row in summary.resources:
        table.add_row(
            _result_cell(row.passed),
            row.name,
            str(row.extension_violations),
            str(row.naming_violations),
            str(row.num_files),
            format_duration(row.duration),
        )
    return table


__all__ = ["format_duration", "resource_table", "summary_table"]
