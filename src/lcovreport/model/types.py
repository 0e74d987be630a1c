"""Shared constants and type aliases used across lcovreport."""

from __future__ import annotations

from typing import TypeAlias

FULL_COVERAGE: int = 100

Minimum: TypeAlias = float | None
"""Required line coverage percentage; ``None`` means no requirement."""


__all__ = ["FULL_COVERAGE", "Minimum"]
