from itertools import permutations

from lcovreport.model.aggregate import AggregateCoverage, filter_records, sum_records
from lcovreport.model.records import CoverageCounter
from tests.conftest import make_record

RECORDS = [
    make_record("/repo/a.py", lines=(10, 8), functions=(2, 1), branches=(4, 2)),
    make_record("/repo/b.py", lines=(5, 0), functions=(1, 0), branches=(0, 0)),
    make_record("/repo/c.py", lines=(0, 0), functions=(0, 0), branches=(2, 2)),
]


def test_sum_all_records() -> None:
    assert sum_records(RECORDS) == AggregateCoverage(
        lines=CoverageCounter(15, 8),
        functions=CoverageCounter(3, 1),
        branches=CoverageCounter(6, 4),
    )


def test_sum_is_order_independent() -> None:
    expected = sum_records(RECORDS)
    for perm in permutations(RECORDS):
        assert sum_records(perm) == expected


def test_sum_filtered_by_exact_path() -> None:
    total = sum_records(RECORDS, {"/repo/b.py", "/repo/missing.py"})
    assert total == AggregateCoverage(
        lines=CoverageCounter(5, 0),
        functions=CoverageCounter(1, 0),
        branches=CoverageCounter(0, 0),
    )


def test_filter_does_not_match_partial_paths() -> None:
    assert filter_records(RECORDS, {"repo/a.py", "a.py", "/repo"}) == []


def test_no_data_for_empty_input() -> None:
    assert sum_records([]) is None


def test_no_data_when_filter_matches_nothing() -> None:
    assert sum_records(RECORDS, set()) is None


def test_zero_counts_are_not_no_data() -> None:
    total = sum_records([make_record("/repo/empty.py")])
    assert total is not None
    assert total == AggregateCoverage()


def test_aggregation_leaves_records_untouched() -> None:
    before = list(RECORDS)
    sum_records(RECORDS)
    assert RECORDS == before
    assert RECORDS[0].lines == CoverageCounter(10, 8)


def test_filter_preserves_input_order() -> None:
    selected = filter_records(RECORDS, {"/repo/c.py", "/repo/a.py"})
    assert [r.path for r in selected] == ["/repo/a.py", "/repo/c.py"]
