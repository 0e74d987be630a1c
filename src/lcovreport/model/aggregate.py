from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from lcovreport.model.records import CoverageCounter

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from lcovreport.model.records import CoverageRecord


@dataclass(frozen=True, slots=True)
class AggregateCoverage:
    """Summed counters across a set of records."""

    lines: CoverageCounter = CoverageCounter()
    functions: CoverageCounter = CoverageCounter()
    branches: CoverageCounter = CoverageCounter()

    def __add__(self, other: AggregateCoverage | CoverageRecord) -> AggregateCoverage:
        return AggregateCoverage(
            lines=self.lines + other.lines,
            functions=self.functions + other.functions,
            branches=self.branches + other.branches,
        )


MaybeAggregate: TypeAlias = AggregateCoverage | None
"""``None`` stands for "no data": no record matched."""


def filter_records(
    records: Iterable[CoverageRecord],
    paths: Collection[str] | None = None,
) -> list[CoverageRecord]:
    """Return records whose path is in *paths*, or all of them when *paths* is ``None``."""
    if paths is None:
        return list(records)
    return [r for r in records if r.path in paths]


def sum_records(
    records: Iterable[CoverageRecord],
    paths: Collection[str] | None = None,
) -> MaybeAggregate:
    """Sum the counters of the matching records.

    Returns ``None`` when nothing matches, which is distinct from an
    aggregate whose counts are all zero.
    """
    selected = filter_records(records, paths)
    if not selected:
        return None

    total = AggregateCoverage()
    for record in selected:
        total += record
    return total


__all__ = ["AggregateCoverage", "MaybeAggregate", "filter_records", "sum_records"]
