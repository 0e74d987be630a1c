"""Typed per-file coverage records.

Records are produced once per run by the LCOV reader (or converted from a
duck-typed mapping at the boundary) and never mutated afterwards. Aggregation
builds new values instead.
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from lcovreport.errors import MalformedRecordError
from lcovreport.model.metrics import pct

COUNTER_FIELDS: tuple[str, ...] = ("lines", "functions", "branches")


@dataclass(frozen=True, slots=True)
class CoverageCounter:
    """A ``found``/``hit`` pair for one kind of coverage item."""

    found: int = 0
    hit: int = 0

    def __post_init__(self) -> None:
        for name in ("found", "hit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                msg = f"{name} must be an integer, got {value!r}"
                raise MalformedRecordError(msg)
            if value < 0:
                msg = f"{name} must be non-negative, got {value}"
                raise MalformedRecordError(msg)
        if self.hit > self.found:
            msg = f"hit ({self.hit}) exceeds found ({self.found})"
            raise MalformedRecordError(msg)

    def __add__(self, other: CoverageCounter) -> CoverageCounter:
        if not isinstance(other, CoverageCounter):
            return NotImplemented
        return CoverageCounter(found=self.found + other.found, hit=self.hit + other.hit)

    @property
    def percentage(self) -> float:
        """Unrounded percentage; ``0`` when nothing was found."""
        return pct(self.hit, self.found)


@dataclass(frozen=True, slots=True)
class CoverageRecord:
    """Coverage counters of a single source file."""

    path: str
    lines: CoverageCounter = CoverageCounter()
    functions: CoverageCounter = CoverageCounter()
    branches: CoverageCounter = CoverageCounter()

    @property
    def basename(self) -> str:
        return posixpath.basename(self.path.replace("\\", "/"))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> CoverageRecord:
        """Validate a parser-shaped mapping and convert it into a record.

        The mapping follows the shape emitted by common LCOV parsers::

            {"file": "/abs/a.py", "lines": {"found": 3, "hit": 2}, ...}

        ``path`` is accepted as an alias of ``file``.
        """
        path = data.get("file", data.get("path"))
        if not isinstance(path, str) or not path:
            msg = f"coverage record has no file path: {data!r}"
            raise MalformedRecordError(msg)

        counters: dict[str, CoverageCounter] = {}
        for name in COUNTER_FIELDS:
            raw = data.get(name)
            if not isinstance(raw, Mapping) or "found" not in raw or "hit" not in raw:
                msg = f"{path}: missing {name} counters"
                raise MalformedRecordError(msg)
            try:
                counters[name] = CoverageCounter(found=raw["found"], hit=raw["hit"])
            except MalformedRecordError as exc:
                msg = f"{path}: invalid {name} counters: {exc}"
                raise MalformedRecordError(msg) from exc
        return cls(path=path, **counters)


__all__ = ["COUNTER_FIELDS", "CoverageCounter", "CoverageRecord"]
