"""Helpers for rendering aligned Markdown tables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.cells import cell_len

if TYPE_CHECKING:
    from collections.abc import Sequence

_MIN_WIDTH = 3


def _compute_col_widths(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[int]:
    widths: list[int] = []
    for col, header in enumerate(headers):
        col_texts = [header, *(r[col] for r in rows)]
        widths.append(max(_MIN_WIDTH, *(cell_len(text) for text in col_texts)))
    return widths


def _pad(text: str, width: int) -> str:
    return text + " " * (width - cell_len(text))


def _render_row(cells: Sequence[str], col_widths: Sequence[int]) -> str:
    return "| " + " | ".join(_pad(c, w) for c, w in zip(cells, col_widths, strict=True)) + " |"


def format_markdown_table(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> str:
    """Render a left-aligned Markdown table, padding each column to its widest cell.

    Widths are measured in terminal cells so emoji status glyphs line up.
    """
    if not headers:
        return ""
    text_rows = [[str(val) for val in row] for row in rows]
    for row in text_rows:
        if len(row) != len(headers):
            msg = f"row has {len(row)} cells, expected {len(headers)}"
            raise ValueError(msg)

    col_widths = _compute_col_widths(headers, text_rows)
    sep_line = "| " + " | ".join("-" * w for w in col_widths) + " |"
    body_lines = [_render_row(row, col_widths) for row in text_rows]
    return "\n".join([_render_row(headers, col_widths), sep_line, *body_lines])


__all__ = ["format_markdown_table"]
