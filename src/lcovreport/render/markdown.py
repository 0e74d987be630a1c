"""Markdown rendering of coverage reports.

Every function here is pure: the same input always yields byte-identical
text. The first line of a report is the comment identity marker used to find
and update a previously posted comment, so its format must never change.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from lcovreport.model.aggregate import filter_records
from lcovreport.model.thresholds import evaluate_file
from lcovreport.render.table import format_markdown_table

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence

    from lcovreport.model.aggregate import MaybeAggregate
    from lcovreport.model.records import CoverageCounter, CoverageRecord
    from lcovreport.model.thresholds import Evaluation
    from lcovreport.model.types import Minimum

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"
NOT_AVAILABLE = "N/A"

REPORT_TITLE = "LCOV Report"
COMMENT_ID_PREFIX = "[lcov-comment-id]: <> "

FILE_TABLE_HEADERS = ("File", "Lines", "Functions", "Branches", "Status")
INDIVIDUAL_TABLE_HEADERS = ("File", "Coverage", "Status")


def format_minimum(minimum: Minimum) -> str:
    """Format a minimum as ``75`` or ``72.5``; no requirement prints as ``0``."""
    if minimum is None:
        return "0"
    if float(minimum).is_integer():
        return str(int(minimum))
    return str(minimum)


def render_percentage_cell(counter: CoverageCounter) -> str:
    if counter.found == 0:
        return NOT_AVAILABLE
    return f"{counter.hit}/{counter.found} ({counter.percentage:.1f}%)"


def render_pass_glyph(passed: bool) -> str:  # noqa: FBT001
    return PASS_GLYPH if passed else FAIL_GLYPH


def render_comment_identity(title: str) -> str:
    return f"{COMMENT_ID_PREFIX}({title})\n"


def render_header(title: str, passed: bool) -> str:  # noqa: FBT001
    suffix = f" - {title}" if title else ""
    return f"## {REPORT_TITLE}{suffix} {render_pass_glyph(passed)}\n"


def render_section_header(name: str) -> str:
    return f"### {name}\n"


def render_overall_section(aggregate: MaybeAggregate, minimum: Minimum, passed: bool) -> str:  # noqa: FBT001
    """Render the Lines/Functions/Branches summary of an aggregate."""
    if aggregate is None:
        return f"{NOT_AVAILABLE}\n"
    return (
        f"- Lines: {render_percentage_cell(aggregate.lines)} {render_pass_glyph(passed)}"
        f" (Minimum coverage is {format_minimum(minimum)}%)\n"
        f"- Functions: {render_percentage_cell(aggregate.functions)}\n"
        f"- Branches: {render_percentage_cell(aggregate.branches)}\n"
        "\n"
    )


def render_file_table(
    records: Sequence[CoverageRecord],
    paths: Collection[str] | None,
    minimum: Minimum,
) -> str:
    """Render one table row per matching record.

    The section disappears entirely (empty string) when nothing matches. The
    Status column is informational when no minimum is configured and then
    always shows a pass.
    """
    selected = filter_records(records, paths)
    if not selected:
        return ""

    out = ""
    if minimum is not None:
        out += f"#### Files (Minimum Coverage: {format_minimum(minimum)}%)\n\n"

    rows = [
        (
            record.basename,
            render_percentage_cell(record.lines),
            render_percentage_cell(record.functions),
            render_percentage_cell(record.branches),
            render_pass_glyph(evaluate_file(record, minimum).passed),
        )
        for record in selected
    ]
    out += format_markdown_table(FILE_TABLE_HEADERS, rows) + "\n\n"
    return out


def render_individual_files(evaluations: Sequence[Evaluation] | None, minimum: Minimum) -> str:
    """Render a File/Coverage/Status table from per-file evaluations."""
    if not evaluations:
        return ""

    rows = [
        (
            _basename(e.identifier),
            f"{e.coverage:.1f}%",
            render_pass_glyph(e.passed),
        )
        for e in evaluations
    ]
    return (
        f"#### Individual Changed Files (Minimum: {format_minimum(minimum)}%)\n\n"
        + format_markdown_table(INDIVIDUAL_TABLE_HEADERS, rows)
        + "\n\n"
    )


def render_report(
    *,
    title: str,
    passed: bool,
    records: Sequence[CoverageRecord],
    changed_paths: Collection[str],
    all_files: MaybeAggregate,
    all_files_minimum: Minimum,
    all_files_passed: bool,
    changed_files: MaybeAggregate,
    changed_files_minimum: Minimum,
    changed_files_passed: bool,
) -> str:
    """Assemble the full report in its fixed section order."""
    return (
        render_comment_identity(title)
        + render_header(title, passed)
        + render_section_header("All Files")
        + render_overall_section(all_files, all_files_minimum, all_files_passed)
        + render_section_header("Changed Files")
        + render_overall_section(changed_files, changed_files_minimum, changed_files_passed)
        + render_file_table(records, changed_paths, changed_files_minimum)
    )


def _basename(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


__all__ = [
    "FAIL_GLYPH",
    "NOT_AVAILABLE",
    "PASS_GLYPH",
    "format_minimum",
    "render_comment_identity",
    "render_file_table",
    "render_header",
    "render_individual_files",
    "render_overall_section",
    "render_pass_glyph",
    "render_percentage_cell",
    "render_report",
    "render_section_header",
]
