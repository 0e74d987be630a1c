"""Central configuration and constants for ``lcovreport``."""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from lcovreport import logger
from lcovreport.model.thresholds import parse_minimum

if TYPE_CHECKING:
    from collections.abc import Mapping

    from lcovreport.model.types import Minimum

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_LCOV_FILE = "coverage/lcov.info"
DEFAULT_API_URL = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_timeout(value: str) -> float | None:
    """Return *value* as a positive number of seconds, or ``None`` when it is not one."""
    try:
        seconds = float(value)
    except ValueError:
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None
    return seconds


def _input(environ: Mapping[str, str], name: str, default: str = "") -> str:
    """Return a GitHub Actions input (``INPUT_<NAME>``), accepting ``-`` or ``_`` spellings."""
    key = name.upper()
    for candidate in (f"INPUT_{key}", f"INPUT_{key.replace('-', '_')}"):
        value = environ.get(candidate)
        if value is not None and value.strip():
            return value.strip()
    return default


def _timeout(environ: Mapping[str, str]) -> float:
    raw = _input(environ, "api-timeout")
    if not raw:
        return DEFAULT_TIMEOUT
    seconds = parse_timeout(raw)
    if seconds is None:
        logger.warning("ignoring invalid API timeout %r; using %ss", raw, DEFAULT_TIMEOUT)
        return DEFAULT_TIMEOUT
    return seconds


@dataclass(frozen=True, slots=True)
class Settings:
    """Run configuration, read once and passed explicitly.

    ``all_files_minimum`` and ``changed_files_minimum`` are ``None`` when no
    requirement is configured.
    """

    lcov_file: Path
    working_directory: Path
    title: str = ""
    all_files_minimum: Minimum = None
    changed_files_minimum: Minimum = None
    artifact_name: str = ""
    github_token: str = ""
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    html_output_root: Path | None = None
    individual_table: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str], *, cwd: Path | None = None) -> Settings:
        """Build settings from GitHub Actions style ``INPUT_*`` variables."""
        base = (cwd or Path.cwd()).resolve()
        working_directory = (base / _input(environ, "working-directory", ".")).resolve()
        lcov_file = (base / _input(environ, "lcov-file", DEFAULT_LCOV_FILE)).resolve()
        return cls(
            lcov_file=lcov_file,
            working_directory=working_directory,
            title=_input(environ, "comment-title"),
            all_files_minimum=parse_minimum(_input(environ, "all-files-minimum-coverage")),
            changed_files_minimum=parse_minimum(_input(environ, "changed-files-minimum-coverage")),
            artifact_name=_input(environ, "artifact-name"),
            github_token=_input(environ, "github-token") or environ.get("GITHUB_TOKEN", ""),
            api_url=environ.get("GITHUB_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=_timeout(environ),
            individual_table=_input(environ, "individual-table").lower() in _TRUTHY,
        )


__all__ = ["DEFAULT_API_URL", "DEFAULT_LCOV_FILE", "DEFAULT_TIMEOUT", "LOG_FORMAT", "Settings", "parse_timeout"]
