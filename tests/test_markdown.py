from lcovreport.model.aggregate import AggregateCoverage, sum_records
from lcovreport.model.records import CoverageCounter
from lcovreport.model.thresholds import Evaluation
from lcovreport.render.markdown import (
    FAIL_GLYPH,
    PASS_GLYPH,
    format_minimum,
    render_comment_identity,
    render_file_table,
    render_header,
    render_individual_files,
    render_overall_section,
    render_pass_glyph,
    render_percentage_cell,
    render_report,
    render_section_header,
)
from lcovreport.render.table import format_markdown_table
from tests.conftest import make_record

# --------------------------------------------------------------------------- #
# cells and glyphs                                                            #
# --------------------------------------------------------------------------- #


def test_percentage_cell() -> None:
    assert render_percentage_cell(CoverageCounter(found=10, hit=8)) == "8/10 (80.0%)"
    assert render_percentage_cell(CoverageCounter(found=3, hit=1)) == "1/3 (33.3%)"


def test_percentage_cell_without_found_items() -> None:
    assert render_percentage_cell(CoverageCounter(found=0, hit=0)) == "N/A"


def test_percentage_cell_rounds_only_for_display() -> None:
    assert render_percentage_cell(CoverageCounter(found=2500, hit=1874)) == "1874/2500 (75.0%)"


def test_pass_glyph() -> None:
    assert render_pass_glyph(True) == PASS_GLYPH == "✅"  # noqa: FBT003
    assert render_pass_glyph(False) == FAIL_GLYPH == "❌"  # noqa: FBT003


def test_format_minimum() -> None:
    assert format_minimum(75.0) == "75"
    assert format_minimum(72.5) == "72.5"
    assert format_minimum(None) == "0"


# --------------------------------------------------------------------------- #
# headers                                                                     #
# --------------------------------------------------------------------------- #


def test_comment_identity_is_stable() -> None:
    assert render_comment_identity("backend") == "[lcov-comment-id]: <> (backend)\n"
    assert render_comment_identity("backend") == render_comment_identity("backend")
    assert render_comment_identity("") == "[lcov-comment-id]: <> ()\n"


def test_header_with_and_without_title() -> None:
    assert render_header("backend", True) == "## LCOV Report - backend ✅\n"  # noqa: FBT003
    assert render_header("", False) == "## LCOV Report ❌\n"  # noqa: FBT003


def test_section_header() -> None:
    assert render_section_header("All Files") == "### All Files\n"


# --------------------------------------------------------------------------- #
# overall section                                                             #
# --------------------------------------------------------------------------- #


def test_overall_section_no_data() -> None:
    assert render_overall_section(None, 80, False) == "N/A\n"  # noqa: FBT003


def test_overall_section_lists_three_counters() -> None:
    aggregate = AggregateCoverage(
        lines=CoverageCounter(10, 8),
        functions=CoverageCounter(4, 1),
        branches=CoverageCounter(0, 0),
    )
    assert render_overall_section(aggregate, 75, True) == (  # noqa: FBT003
        "- Lines: 8/10 (80.0%) ✅ (Minimum coverage is 75%)\n"
        "- Functions: 1/4 (25.0%)\n"
        "- Branches: N/A\n"
        "\n"
    )


def test_overall_section_without_minimum() -> None:
    aggregate = AggregateCoverage(lines=CoverageCounter(2, 1))
    assert render_overall_section(aggregate, None, True).startswith(  # noqa: FBT003
        "- Lines: 1/2 (50.0%) ✅ (Minimum coverage is 0%)\n"
    )


# --------------------------------------------------------------------------- #
# file table                                                                  #
# --------------------------------------------------------------------------- #


def test_file_table_empty_selection_renders_nothing() -> None:
    records = [make_record("/repo/a.py", lines=(10, 1))]
    assert render_file_table(records, set(), 75) == ""
    assert render_file_table(records, {"/repo/other.py"}, 75) == ""
    assert render_file_table([], None, 75) == ""


def test_file_table_heading_only_with_minimum() -> None:
    records = [make_record("/repo/a.py", lines=(10, 9))]
    with_minimum = render_file_table(records, None, 75)
    without_minimum = render_file_table(records, None, None)
    assert with_minimum.startswith("#### Files (Minimum Coverage: 75%)\n\n| File ")
    assert without_minimum.startswith("| File ")
    assert "####" not in without_minimum


def test_file_table_rows_use_basename_and_status() -> None:
    records = [
        make_record("/repo/src/good.py", lines=(10, 8), functions=(2, 2), branches=(4, 1)),
        make_record("/repo/src/bad.py", lines=(10, 5)),
        make_record("/repo/src/untouched.py", lines=(10, 0)),
    ]
    out = render_file_table(records, {"/repo/src/good.py", "/repo/src/bad.py"}, 75)
    expected_table = format_markdown_table(
        ("File", "Lines", "Functions", "Branches", "Status"),
        [
            ("good.py", "8/10 (80.0%)", "2/2 (100.0%)", "1/4 (25.0%)", "✅"),
            ("bad.py", "5/10 (50.0%)", "N/A", "N/A", "❌"),
        ],
    )
    assert out == f"#### Files (Minimum Coverage: 75%)\n\n{expected_table}\n\n"
    assert "/repo/src" not in out
    assert "untouched.py" not in out


def test_file_table_status_informational_without_minimum() -> None:
    records = [make_record("/repo/a.py", lines=(10, 0)), make_record("/repo/b.py", lines=(0, 0))]
    out = render_file_table(records, None, None)
    assert out.count(PASS_GLYPH) == 2
    assert FAIL_GLYPH not in out


def test_file_table_zero_lines_fails_positive_minimum() -> None:
    out = render_file_table([make_record("/repo/empty.py")], None, 75)
    row = out.rstrip("\n").splitlines()[-1]
    assert row.startswith("| empty.py | N/A ")
    assert FAIL_GLYPH in row


def test_file_table_scenario_three_files() -> None:
    records = [
        make_record("/repo/file1.js", lines=(100, 90)),
        make_record("/repo/file2.js", lines=(100, 60)),
        make_record("/repo/file3.js", lines=(100, 75)),
    ]
    out = render_file_table(records, None, 75)
    assert out.count(PASS_GLYPH) == 2
    assert out.count(FAIL_GLYPH) == 1


# --------------------------------------------------------------------------- #
# individual changed files                                                    #
# --------------------------------------------------------------------------- #


def test_individual_files_table() -> None:
    evaluations = [
        Evaluation("/path/to/file1.js", 80.0, passed=True),
        Evaluation("/path/to/file2.js", 50.0, passed=False),
    ]
    out = render_individual_files(evaluations, 75)
    assert "#### Individual Changed Files (Minimum: 75%)" in out
    assert "file1.js" in out
    assert "file2.js" in out
    assert "/path/to" not in out
    assert "80.0%" in out
    assert "50.0%" in out
    assert out.count(PASS_GLYPH) == 1
    assert out.count(FAIL_GLYPH) == 1


def test_individual_files_table_structure() -> None:
    out = render_individual_files([Evaluation("/path/to/file1.js", 80.0, passed=True)], 75)
    expected = format_markdown_table(("File", "Coverage", "Status"), [("file1.js", "80.0%", "✅")])
    assert expected in out


def test_individual_files_mixed_statuses() -> None:
    evaluations = [
        Evaluation("/path/to/file1.js", 90.0, passed=True),
        Evaluation("/path/to/file2.js", 60.0, passed=False),
        Evaluation("/path/to/file3.js", 75.0, passed=True),
    ]
    out = render_individual_files(evaluations, 75)
    for text in ("file1.js", "file2.js", "file3.js", "90.0%", "60.0%", "75.0%"):
        assert text in out
    assert out.count(PASS_GLYPH) == 2
    assert out.count(FAIL_GLYPH) == 1


def test_individual_files_empty() -> None:
    assert render_individual_files([], 75) == ""
    assert render_individual_files(None, 75) == ""


# --------------------------------------------------------------------------- #
# full report                                                                 #
# --------------------------------------------------------------------------- #


def _report_inputs() -> dict:
    records = [
        make_record("/repo/a.py", lines=(10, 9), functions=(1, 1), branches=(2, 1)),
        make_record("/repo/b.py", lines=(10, 5), functions=(2, 0), branches=(0, 0)),
    ]
    changed = {"/repo/b.py"}
    return {
        "title": "api",
        "passed": False,
        "records": records,
        "changed_paths": changed,
        "all_files": sum_records(records),
        "all_files_minimum": 60.0,
        "all_files_passed": True,
        "changed_files": sum_records(records, changed),
        "changed_files_minimum": 80.0,
        "changed_files_passed": False,
    }


def test_report_sections_in_fixed_order() -> None:
    out = render_report(**_report_inputs())
    table = format_markdown_table(
        ("File", "Lines", "Functions", "Branches", "Status"),
        [("b.py", "5/10 (50.0%)", "0/2 (0.0%)", "N/A", "❌")],
    )
    assert out == (
        "[lcov-comment-id]: <> (api)\n"
        "## LCOV Report - api ❌\n"
        "### All Files\n"
        "- Lines: 14/20 (70.0%) ✅ (Minimum coverage is 60%)\n"
        "- Functions: 1/3 (33.3%)\n"
        "- Branches: 1/2 (50.0%)\n"
        "\n"
        "### Changed Files\n"
        "- Lines: 5/10 (50.0%) ❌ (Minimum coverage is 80%)\n"
        "- Functions: 0/2 (0.0%)\n"
        "- Branches: N/A\n"
        "\n"
        "#### Files (Minimum Coverage: 80%)\n"
        "\n"
        f"{table}\n"
        "\n"
    )


def test_report_is_idempotent() -> None:
    assert render_report(**_report_inputs()) == render_report(**_report_inputs())


def test_report_without_changed_files() -> None:
    inputs = _report_inputs()
    inputs.update(changed_paths=set(), changed_files=None, changed_files_passed=False, passed=True)
    out = render_report(**inputs)
    assert out.endswith("### Changed Files\nN/A\n")
    assert "| File" not in out
