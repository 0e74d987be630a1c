from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner

from lcovreport.model.records import CoverageCounter, CoverageRecord

# lines, functions, branches as (found, hit) pairs
CountsSpec = tuple[tuple[int, int], tuple[int, int], tuple[int, int]]


@pytest.fixture(autouse=True)
def _isolate_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a CI environment from turning test runs into pull request runs."""
    for key in list(os.environ):
        if key.startswith(("INPUT_", "GITHUB_")):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


def make_record(
    path: str,
    lines: tuple[int, int] = (0, 0),
    functions: tuple[int, int] = (0, 0),
    branches: tuple[int, int] = (0, 0),
) -> CoverageRecord:
    return CoverageRecord(
        path=path,
        lines=CoverageCounter(*lines),
        functions=CoverageCounter(*functions),
        branches=CoverageCounter(*branches),
    )


def lcov_text(mapping: Mapping[str, CountsSpec]) -> str:
    """Build LCOV text using only summary counters."""
    blocks: list[str] = []
    for file, ((lf, lh), (fnf, fnh), (brf, brh)) in mapping.items():
        blocks.append(
            "TN:\n"
            f"SF:{file}\n"
            f"FNF:{fnf}\nFNH:{fnh}\n"
            f"LF:{lf}\nLH:{lh}\n"
            f"BRF:{brf}\nBRH:{brh}\n"
            "end_of_record\n"
        )
    return "".join(blocks)


@pytest.fixture
def lcov_file(tmp_path: Path) -> Callable[..., Path]:
    def write(mapping: Mapping[str, CountsSpec], *, filename: str = "lcov.info") -> Path:
        path = tmp_path / filename
        path.write_text(lcov_text(mapping), encoding="utf-8")
        return path

    return write
