from lcovreport.model.aggregate import AggregateCoverage, MaybeAggregate, filter_records, sum_records
from lcovreport.model.records import CoverageCounter, CoverageRecord
from lcovreport.model.thresholds import (
    Evaluation,
    all_files_passed,
    evaluate_file,
    is_passed,
    line_coverage,
    overall_passed,
    parse_minimum,
)

__all__ = [
    "AggregateCoverage",
    "CoverageCounter",
    "CoverageRecord",
    "Evaluation",
    "MaybeAggregate",
    "all_files_passed",
    "evaluate_file",
    "filter_records",
    "is_passed",
    "line_coverage",
    "overall_passed",
    "parse_minimum",
    "sum_records",
]
