from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lcovreport import logger
from lcovreport.model.records import CoverageCounter
from lcovreport.model.types import FULL_COVERAGE, Minimum

if TYPE_CHECKING:
    from collections.abc import Iterable

    from lcovreport.model.aggregate import AggregateCoverage, MaybeAggregate
    from lcovreport.model.records import CoverageRecord


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Line coverage of one file or aggregate against a minimum.

    Fields
    ------
    identifier:
        File path, or a label for aggregates.
    coverage:
        Unrounded line coverage percentage (0..100).
    passed:
        Whether ``coverage`` meets the minimum.
    """

    identifier: str
    coverage: float
    passed: bool


def parse_minimum(value: object) -> Minimum:
    """Normalise a configured minimum coverage.

    Non-numeric, empty, non-finite or non-positive values all mean "no
    requirement" and yield ``None``; they never raise.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip().rstrip("%").strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            logger.warning("ignoring non-numeric minimum coverage %r", value)
            return None

    if not math.isfinite(number) or number <= 0:
        return None
    if number > FULL_COVERAGE:
        logger.warning("minimum coverage %s exceeds %d%%; clamping", number, FULL_COVERAGE)
        return float(FULL_COVERAGE)
    return number


def line_coverage(item: CoverageCounter | CoverageRecord | AggregateCoverage) -> float:
    """Return unrounded line coverage; ``0`` when no lines were found."""
    counter = item if isinstance(item, CoverageCounter) else item.lines
    return counter.percentage


def _meets(coverage: float, minimum: Minimum) -> bool:
    return coverage >= (minimum or 0.0)


def is_passed(aggregate: MaybeAggregate, minimum: Minimum) -> bool:
    """Return whether *aggregate* meets *minimum*.

    An absent aggregate ("no data") never passes.
    """
    if aggregate is None:
        return False
    return _meets(line_coverage(aggregate), minimum)


def evaluate_file(record: CoverageRecord, minimum: Minimum) -> Evaluation:
    coverage = line_coverage(record)
    passed = True if minimum is None else _meets(coverage, minimum)
    return Evaluation(identifier=record.path, coverage=coverage, passed=passed)


def all_files_passed(records: Iterable[CoverageRecord], minimum: Minimum) -> bool:
    """Return whether every record individually meets *minimum*.

    Vacuously true for an empty collection or when no minimum is configured.
    """
    if minimum is None:
        return True
    return all(_meets(line_coverage(r), minimum) for r in records)


def overall_passed(
    *,
    all_files: bool,
    has_changed_files: bool,
    changed_files: bool,
    individual_files: bool,
) -> bool:
    """Combine the verdicts; missing changed-file data never blocks the run."""
    return all_files and (not has_changed_files or (changed_files and individual_files))


__all__ = [
    "Evaluation",
    "all_files_passed",
    "evaluate_file",
    "is_passed",
    "line_coverage",
    "overall_passed",
    "parse_minimum",
]
