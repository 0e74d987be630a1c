"""Reader for LCOV tracefiles (``lcov.info``).

Only the per-file counters the report needs are extracted. Each ``SF:`` block
yields one :class:`~lcovreport.model.records.CoverageRecord`; blocks naming
the same file (several test runs) are merged.

Counts come from the detail lines (``DA``, ``FN``/``FNDA``, ``BRDA``) when a
file has them and from the ``LF``/``LH``, ``FNF``/``FNH``, ``BRF``/``BRH``
summaries otherwise; summaries never add to detail-derived counts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from lcovreport import logger
from lcovreport.errors import InvalidLcovError, LcovFileNotFoundError, MalformedRecordError
from lcovreport.model.records import CoverageCounter, CoverageRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

_SUMMARY_KEYS: dict[str, tuple[str, str]] = {
    "LF": ("lines", "found"),
    "LH": ("lines", "hit"),
    "FNF": ("functions", "found"),
    "FNH": ("functions", "hit"),
    "BRF": ("branches", "found"),
    "BRH": ("branches", "hit"),
}

_IGNORED_KEYS = frozenset({"TN", "VER", "FNL", "FNA", "LN"})


@dataclass(slots=True)
class _Block:
    """Raw data of one ``SF:`` ... ``end_of_record`` block."""

    path: str
    start: int
    lines: dict[int, int] = field(default_factory=dict)
    functions: dict[str, int] = field(default_factory=dict)
    branches: dict[tuple[int, str, str], int] = field(default_factory=dict)
    summary: dict[tuple[str, str], int] = field(default_factory=dict)


@dataclass(slots=True)
class _FileCoverage:
    """Merged coverage of every block naming the same file."""

    path: str
    lines: dict[int, int] = field(default_factory=dict)
    functions: dict[str, int] = field(default_factory=dict)
    branches: dict[tuple[int, str, str], int] = field(default_factory=dict)
    summary: dict[str, CoverageCounter] = field(default_factory=dict)

    def merge(self, block: _Block) -> None:
        for kind in ("lines", "functions", "branches"):
            details: dict = getattr(block, kind)
            if details:
                merged: dict = getattr(self, kind)
                for key, hits in details.items():
                    merged[key] = merged.get(key, 0) + hits
                continue
            found = block.summary.get((kind, "found"))
            hit = block.summary.get((kind, "hit"), 0)
            if found is None:
                continue
            try:
                counter = CoverageCounter(found=found, hit=hit)
            except MalformedRecordError as exc:
                msg = f"{block.path}: invalid {kind} summary in record starting at line {block.start}: {exc}"
                raise InvalidLcovError(msg) from exc
            self.summary[kind] = self.summary.get(kind, CoverageCounter()) + counter

    def _counter(self, kind: str) -> CoverageCounter:
        details: dict[object, int] = getattr(self, kind)
        if not details:
            return self.summary.get(kind, CoverageCounter())
        if kind in self.summary:
            logger.warning("%s: %s detail and summary-only records mixed; using the details", self.path, kind)
        return CoverageCounter(found=len(details), hit=sum(1 for hits in details.values() if hits > 0))

    def to_record(self) -> CoverageRecord:
        return CoverageRecord(
            path=self.path,
            lines=self._counter("lines"),
            functions=self._counter("functions"),
            branches=self._counter("branches"),
        )


def _int(value: str, *, lineno: int, source: str) -> int:
    try:
        number = int(value.strip())
    except ValueError as exc:
        msg = f"{source}:{lineno}: expected an integer, got {value!r}"
        raise InvalidLcovError(msg) from exc
    if number < 0:
        msg = f"{source}:{lineno}: negative count {number}"
        raise InvalidLcovError(msg)
    return number


def _split(value: str, count: int, *, lineno: int, source: str) -> list[str]:
    parts = value.split(",", count - 1)
    if len(parts) < count:
        msg = f"{source}:{lineno}: malformed entry {value!r}"
        raise InvalidLcovError(msg)
    return parts


def _resolve(path: str, base: Path | None) -> str:
    p = Path(path)
    if base is not None and not p.is_absolute():
        p = base / p
    return str(p.resolve()) if base is not None else str(p)


def _apply(block: _Block, key: str, value: str, *, lineno: int, source: str) -> None:
    if key == "DA":
        line, hits = _split(value, 2, lineno=lineno, source=source)[:2]
        # DA may carry a trailing checksum: DA:<line>,<hits>[,<md5>]
        hits = hits.split(",", 1)[0]
        n = _int(line, lineno=lineno, source=source)
        block.lines[n] = block.lines.get(n, 0) + _int(hits, lineno=lineno, source=source)
    elif key == "FN":
        # FN:<line>,<name> or FN:<start>,<end>,<name>; names may contain commas
        parts = value.split(",", 2)
        if len(parts) == 3 and parts[1].strip().isdigit():
            name = parts[2]
        else:
            name = _split(value, 2, lineno=lineno, source=source)[1]
        block.functions.setdefault(name, 0)
    elif key == "FNDA":
        hits, name = _split(value, 2, lineno=lineno, source=source)
        block.functions[name] = block.functions.get(name, 0) + _int(hits, lineno=lineno, source=source)
    elif key == "BRDA":
        line, blk, branch, taken = _split(value, 4, lineno=lineno, source=source)
        ident = (_int(line, lineno=lineno, source=source), blk.strip(), branch.strip())
        count = 0 if taken.strip() == "-" else _int(taken, lineno=lineno, source=source)
        block.branches[ident] = block.branches.get(ident, 0) + count
    elif key in _SUMMARY_KEYS:
        block.summary[_SUMMARY_KEYS[key]] = _int(value, lineno=lineno, source=source)
    elif key not in _IGNORED_KEYS:
        logger.debug("%s:%d: ignoring unknown LCOV key %r", source, lineno, key)


def _iter_blocks(lines: Iterable[str], *, source: str = "<lcov>") -> Iterable[_Block]:
    current: _Block | None = None
    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        if line == "end_of_record":
            if current is None:
                msg = f"{source}:{lineno}: end_of_record without a matching SF line"
                raise InvalidLcovError(msg)
            yield current
            current = None
            continue

        key, sep, value = line.partition(":")
        if not sep:
            msg = f"{source}:{lineno}: expected KEY:VALUE, got {line!r}"
            raise InvalidLcovError(msg)
        if key == "SF":
            if current is not None:
                msg = f"{source}:{lineno}: record for {current.path} is missing end_of_record"
                raise InvalidLcovError(msg)
            current = _Block(path=value.strip(), start=lineno)
            continue
        if current is None:
            if key in _IGNORED_KEYS:
                continue
            msg = f"{source}:{lineno}: {key} entry outside of a record"
            raise InvalidLcovError(msg)
        _apply(current, key, value, lineno=lineno, source=source)

    if current is not None:
        msg = f"{source}: record for {current.path} is missing end_of_record"
        raise InvalidLcovError(msg)


def parse_lcov(text: str, *, base: Path | None = None, source: str = "<lcov>") -> list[CoverageRecord]:
    """Parse LCOV *text* into records, resolving relative paths against *base*."""
    merged: dict[str, _FileCoverage] = {}
    for block in _iter_blocks(text.splitlines(), source=source):
        path = _resolve(block.path, base)
        merged.setdefault(path, _FileCoverage(path=path)).merge(block)

    if not merged:
        msg = f"{source}: no coverage records found"
        raise InvalidLcovError(msg)
    return [fc.to_record() for fc in merged.values()]


def read_lcov(path: Path, *, base: Path | None = None) -> list[CoverageRecord]:
    """Read and parse the LCOV file at *path*."""
    if not path.is_file():
        msg = f"LCOV file not found: {path}"
        raise LcovFileNotFoundError(msg)
    logger.info("Parsing coverage file %s", path)
    text = path.read_text(encoding="utf-8", errors="replace")
    return parse_lcov(text, base=base, source=str(path))


__all__ = ["parse_lcov", "read_lcov"]
