from lcovreport.render.markdown import (
    FAIL_GLYPH,
    PASS_GLYPH,
    render_comment_identity,
    render_file_table,
    render_header,
    render_individual_files,
    render_overall_section,
    render_pass_glyph,
    render_percentage_cell,
    render_report,
)
from lcovreport.render.table import format_markdown_table

__all__ = [
    "FAIL_GLYPH",
    "PASS_GLYPH",
    "format_markdown_table",
    "render_comment_identity",
    "render_file_table",
    "render_header",
    "render_individual_files",
    "render_overall_section",
    "render_pass_glyph",
    "render_percentage_cell",
    "render_report",
]
