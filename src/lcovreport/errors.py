"""Centralised exception hierarchy for lcovreport."""

from __future__ import annotations


class LcovReportError(Exception):
    """Base class for all custom lcovreport exceptions."""


class LcovError(LcovReportError):
    """Base class for errors related to LCOV file handling."""


class LcovFileNotFoundError(LcovError):
    """LCOV file could not be located on disk."""


class InvalidLcovError(LcovError):
    """LCOV file was found but does not contain a valid report."""


class MalformedRecordError(LcovReportError):
    """A coverage record is missing counters or has inconsistent counts."""


class ConfigError(LcovReportError):
    """Configuration could not be resolved."""


class GitHubAPIError(LcovReportError):
    """A GitHub REST call failed."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class ArtifactError(LcovReportError):
    """The HTML coverage artifact could not be generated."""


__all__ = [
    "ArtifactError",
    "ConfigError",
    "GitHubAPIError",
    "InvalidLcovError",
    "LcovError",
    "LcovFileNotFoundError",
    "LcovReportError",
    "MalformedRecordError",
]
