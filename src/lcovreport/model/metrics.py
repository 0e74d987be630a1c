from __future__ import annotations

from lcovreport.model.types import FULL_COVERAGE


def pct(hit: int, found: int, *, empty: float = 0.0) -> float:
    """Return the coverage percentage, defaulting to `empty` when nothing was found."""
    return empty if found == 0 else (hit * float(FULL_COVERAGE)) / found


__all__ = ["pct"]
