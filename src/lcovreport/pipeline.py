from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from lcovreport import logger
from lcovreport.artifact import HtmlArtifact, build_html_report
from lcovreport.errors import (
    ArtifactError,
    ConfigError,
    GitHubAPIError,
    InvalidLcovError,
    LcovFileNotFoundError,
    MalformedRecordError,
)
from lcovreport.github import GitHubClient, PullRequestContext
from lcovreport.inputs.lcov import read_lcov
from lcovreport.model.aggregate import MaybeAggregate, filter_records, sum_records
from lcovreport.model.thresholds import (
    Evaluation,
    all_files_passed,
    evaluate_file,
    is_passed,
    overall_passed,
)
from lcovreport.render.markdown import render_comment_identity, render_individual_files, render_report

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping, Sequence
    from pathlib import Path

    from lcovreport.config import Settings
    from lcovreport.model.records import CoverageRecord
    from lcovreport.model.types import Minimum


class PipelineError(Exception):
    """Base class for errors emitted by the pipeline."""


class NoInputError(PipelineError):
    """LCOV input was missing."""


class DataError(PipelineError):
    """LCOV data is malformed or could not be parsed."""


class PublishError(PipelineError):
    """Reading the pull request or posting the comment failed."""


class ThresholdError(PipelineError):
    """Coverage is below the configured minimum."""

    def __init__(self, result: ReportResult) -> None:
        super().__init__("Coverage is below the minimum")
        self.result = result


class CommentPoster(Protocol):
    def changed_files(self, context: PullRequestContext, *, base: Path) -> set[str]: ...

    def post_comment(self, context: PullRequestContext, identity: str, body: str) -> str: ...


class ArtifactBuilder(Protocol):
    def __call__(
        self,
        lcov_file: Path,
        *,
        name: str,
        working_directory: Path,
        output_root: Path | None = None,
    ) -> HtmlArtifact: ...


@dataclass(frozen=True, slots=True)
class ReportResult:
    """Rendered report and every verdict that went into it."""

    text: str
    passed: bool
    records: tuple[CoverageRecord, ...]
    changed_records: tuple[CoverageRecord, ...]
    all_files: MaybeAggregate
    all_files_passed: bool
    changed_files: MaybeAggregate
    changed_files_passed: bool
    changed_files_minimum: Minimum
    evaluations: tuple[Evaluation, ...]
    artifact: HtmlArtifact | None = None
    artifact_error: str | None = None


def build_report(
    records: Sequence[CoverageRecord],
    changed_paths: Collection[str],
    settings: Settings,
) -> ReportResult:
    """Aggregate, evaluate and render; no I/O."""
    all_files = sum_records(records)
    all_ok = is_passed(all_files, settings.all_files_minimum)

    changed_files = sum_records(records, changed_paths)
    has_changed_files = changed_files is not None
    changed_ok = is_passed(changed_files, settings.changed_files_minimum)

    changed_records = filter_records(records, changed_paths)
    individual_ok = all_files_passed(changed_records, settings.changed_files_minimum)
    evaluations = tuple(evaluate_file(r, settings.changed_files_minimum) for r in changed_records)

    passed = overall_passed(
        all_files=all_ok,
        has_changed_files=has_changed_files,
        changed_files=changed_ok,
        individual_files=individual_ok,
    )

    text = render_report(
        title=settings.title,
        passed=passed,
        records=records,
        changed_paths=changed_paths,
        all_files=all_files,
        all_files_minimum=settings.all_files_minimum,
        all_files_passed=all_ok,
        changed_files=changed_files,
        changed_files_minimum=settings.changed_files_minimum,
        changed_files_passed=changed_ok,
    )
    if settings.individual_table:
        text += render_individual_files(evaluations, settings.changed_files_minimum)

    return ReportResult(
        text=text,
        passed=passed,
        records=tuple(records),
        changed_records=tuple(changed_records),
        all_files=all_files,
        all_files_passed=all_ok,
        changed_files=changed_files,
        changed_files_passed=changed_ok,
        changed_files_minimum=settings.changed_files_minimum,
        evaluations=evaluations,
    )


def load_records(settings: Settings) -> list[CoverageRecord]:
    try:
        return read_lcov(settings.lcov_file, base=settings.working_directory)
    except LcovFileNotFoundError as exc:
        raise NoInputError(str(exc)) from exc
    except (InvalidLcovError, MalformedRecordError) as exc:
        msg = f"Error parsing lcov file {settings.lcov_file}: {exc}"
        raise DataError(msg) from exc
    except OSError as exc:
        msg = f"failed to read lcov file {settings.lcov_file}: {exc}"
        raise NoInputError(msg) from exc


def run(
    settings: Settings,
    *,
    environ: Mapping[str, str] | None = None,
    changed_paths: Collection[str] | None = None,
    github: CommentPoster | None = None,
    artifact_builder: ArtifactBuilder = build_html_report,
    publish: bool = True,
) -> ReportResult:
    """Run the whole report: read, fetch changed files, render, publish.

    *changed_paths* replaces the GitHub lookup when given. Publishing only
    happens for pull request runs. A failed HTML artifact build is
    recorded in ``artifact_error`` instead of raised.
    """
    env = os.environ if environ is None else environ
    records = load_records(settings)

    try:
        context = PullRequestContext.from_env(env) if publish else None
    except ConfigError as exc:
        raise PublishError(str(exc)) from exc

    if context is not None and github is None:
        github = GitHubClient(settings.github_token, api_url=settings.api_url, timeout=settings.timeout)

    if changed_paths is None:
        changed_paths = set()
        if context is not None and github is not None:
            try:
                changed_paths = github.changed_files(context, base=settings.working_directory)
            except GitHubAPIError as exc:
                msg = f"failed to fetch changed files: {exc}"
                raise PublishError(msg) from exc

    result = build_report(records, changed_paths, settings)
    logger.info("Coverage check %s", "passed" if result.passed else "failed")

    if context is not None and github is not None:
        try:
            github.post_comment(context, render_comment_identity(settings.title), result.text)
        except GitHubAPIError as exc:
            msg = f"failed to post comment: {exc}"
            raise PublishError(msg) from exc
    else:
        logger.info("Skipped posting comment")

    if settings.artifact_name:
        try:
            artifact = artifact_builder(
                settings.lcov_file,
                name=settings.artifact_name,
                working_directory=settings.working_directory,
                output_root=settings.html_output_root,
            )
        except ArtifactError as exc:
            logger.warning("Failed to build HTML artifact: %s", exc)
            return dataclasses.replace(result, artifact_error=str(exc))
        return dataclasses.replace(result, artifact=artifact)

    logger.info("Skipped building HTML artifact")
    return result


def enforce_threshold(result: ReportResult) -> None:
    """Raise :class:`ThresholdError` when the combined verdict failed."""
    if not result.passed:
        raise ThresholdError(result)


__all__ = [
    "DataError",
    "NoInputError",
    "PipelineError",
    "PublishError",
    "ReportResult",
    "ThresholdError",
    "build_report",
    "enforce_threshold",
    "load_records",
    "run",
]
