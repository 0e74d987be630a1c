from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Annotated

import typer

from lcovreport import logger
from lcovreport.cli.exit_codes import (
    EXIT_CONFIG,
    EXIT_DATAERR,
    EXIT_NOINPUT,
    EXIT_OK,
    EXIT_THRESHOLD,
    EXIT_UNAVAILABLE,
)
from lcovreport.cli.util import (
    color_allowed,
    configure_runtime,
    resolve_use_color,
    write_output,
)
from lcovreport.config import Settings, parse_timeout
from lcovreport.errors import ConfigError
from lcovreport.model.thresholds import parse_minimum
from lcovreport.pipeline import (
    DataError,
    NoInputError,
    PipelineError,
    PublishError,
    ReportResult,
    ThresholdError,
    enforce_threshold,
    run,
)
from lcovreport.render.tty import render_tty_summary

_BOOL_TRUE = True
_BOOL_FALSE = False


def _resolve_settings(
    *,
    lcov_file: Path | None,
    working_directory: Path | None,
    title: str | None,
    all_files_minimum: str | None,
    changed_files_minimum: str | None,
    artifact_name: str | None,
    html_dir: Path | None,
    individual: bool | None,
    timeout: str | None = None,
) -> Settings:
    """Read environment defaults, then apply explicit options on top."""
    settings = Settings.from_env(os.environ)
    overrides: dict[str, object] = {}
    if individual is not None:
        overrides["individual_table"] = individual
    if working_directory is not None:
        overrides["working_directory"] = working_directory.resolve()
    if lcov_file is not None:
        overrides["lcov_file"] = lcov_file.resolve()
    if title is not None:
        overrides["title"] = title
    if all_files_minimum is not None:
        overrides["all_files_minimum"] = parse_minimum(all_files_minimum)
    if changed_files_minimum is not None:
        overrides["changed_files_minimum"] = parse_minimum(changed_files_minimum)
    if artifact_name is not None:
        overrides["artifact_name"] = artifact_name
    if html_dir is not None:
        overrides["html_output_root"] = html_dir.resolve()
    if timeout is not None:
        seconds = parse_timeout(timeout)
        if seconds is None:
            msg = "must be a positive number of seconds"
            raise typer.BadParameter(msg, param_hint="--timeout")
        overrides["timeout"] = seconds
    return dataclasses.replace(settings, **overrides)


def _run_or_exit(
    settings: Settings,
    *,
    changed_paths: set[str] | None,
    publish: bool,
    debug: bool,
) -> ReportResult:
    try:
        return run(settings, changed_paths=changed_paths, publish=publish)
    except NoInputError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        if debug:
            raise
        raise typer.Exit(code=EXIT_NOINPUT) from exc
    except DataError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        if debug:
            raise
        raise typer.Exit(code=EXIT_DATAERR) from exc
    except PublishError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        if debug:
            raise
        code = EXIT_CONFIG if isinstance(exc.__cause__, ConfigError) else EXIT_UNAVAILABLE
        raise typer.Exit(code=code) from exc
    except PipelineError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        if debug:
            raise
        raise typer.Exit(code=EXIT_UNAVAILABLE) from exc


def report_cmd(
    lcov_file: Annotated[
        Path | None,
        typer.Argument(help="LCOV tracefile. Defaults to INPUT_LCOV-FILE or coverage/lcov.info."),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option("--title", help="Report title; also identifies the comment to update."),
    ] = None,
    working_directory: Annotated[
        Path | None,
        typer.Option("-C", "--working-directory", help="Directory LCOV and changed paths are relative to."),
    ] = None,
    all_files_minimum: Annotated[
        str | None,
        typer.Option("--all-files-minimum", help="Minimum line coverage % for all files (0 disables)."),
    ] = None,
    changed_files_minimum: Annotated[
        str | None,
        typer.Option(
            "--changed-files-minimum",
            help="Minimum line coverage % for changed files and each changed file (0 disables).",
        ),
    ] = None,
    changed_file: Annotated[
        list[Path] | None,
        typer.Option(
            "--changed-file",
            help="Treat PATH as changed instead of asking GitHub (repeatable).",
        ),
    ] = None,
    github: Annotated[
        bool,
        typer.Option("--github/--no-github", help="Fetch changed files and post the comment on pull requests."),
    ] = _BOOL_TRUE,
    individual: Annotated[
        bool | None,
        typer.Option("--individual/--no-individual", help="Append a coverage table of each changed file."),
    ] = None,
    artifact_name: Annotated[
        str | None,
        typer.Option("--artifact-name", help="Build an HTML report with genhtml under this name."),
    ] = None,
    html_dir: Annotated[
        Path | None,
        typer.Option("--html-dir", help="Directory the HTML report directory is created in."),
    ] = None,
    timeout: Annotated[
        str | None,
        typer.Option("--timeout", help="GitHub API timeout in seconds. Defaults to INPUT_API-TIMEOUT or 30."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", help="Write the Markdown report to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = _BOOL_FALSE,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = _BOOL_FALSE,
    quiet: Annotated[
        bool,
        typer.Option("-q", "--quiet", help="Suppress INFO logs, emit only errors"),
    ] = _BOOL_FALSE,
    verbose: Annotated[
        bool,
        typer.Option("-v", "--verbose", help="Emit diagnostic logging"),
    ] = _BOOL_FALSE,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Show full tracebacks for errors"),
    ] = _BOOL_FALSE,
) -> None:
    """Render the LCOV coverage report and check it against the minimums."""
    configure_runtime(quiet=quiet, verbose=verbose, debug=debug)

    settings = _resolve_settings(
        lcov_file=lcov_file,
        working_directory=working_directory,
        title=title,
        all_files_minimum=all_files_minimum,
        changed_files_minimum=changed_files_minimum,
        artifact_name=artifact_name,
        html_dir=html_dir,
        individual=individual,
        timeout=timeout,
    )

    changed_paths = (
        {str((settings.working_directory / p).resolve()) for p in changed_file} if changed_file else None
    )
    result = _run_or_exit(settings, changed_paths=changed_paths, publish=github, debug=debug)

    use_color = resolve_use_color(color=color, no_color=no_color, color_allowed=color_allowed(output))
    write_output(result.text, output, pretty=use_color)
    if use_color:
        typer.echo(render_tty_summary(result, color=True), err=True)

    try:
        enforce_threshold(result)
    except ThresholdError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(code=EXIT_THRESHOLD) from exc
    if result.artifact_error is not None:
        typer.echo(f"ERROR: {result.artifact_error}", err=True)
        raise typer.Exit(code=EXIT_UNAVAILABLE)
    logger.debug("report written to %s", output or "stdout")
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("report")(report_cmd)


__all__ = ["register"]
