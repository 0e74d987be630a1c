from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, Annotated

import typer
from typer.main import get_command

from lcovreport import __version__
from lcovreport.cli import report
from lcovreport.cli.exit_codes import EXIT_GENERIC
from lcovreport.errors import LcovReportError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

PROG_NAME = "lcovreport"


def _show_version(value: bool) -> None:  # noqa: FBT001
    if value:
        typer.echo(f"{PROG_NAME} {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(
        help="Summarise LCOV coverage for a repository and the files a pull request changed.",
        no_args_is_help=True,
    )

    @app.callback()
    def _root(
        *,
        version: Annotated[
            bool,
            typer.Option("--version", callback=_show_version, is_eager=True, help="Show version and exit"),
        ] = False,
    ) -> None:
        """Entry point; all work happens in the subcommands."""

    report.register(app)
    return app


def default_args(argv: Sequence[str], environ: Mapping[str, str]) -> list[str]:
    """Return the arguments to run with.

    A bare invocation inside GitHub Actions means ``report`` driven by the
    action's ``INPUT_*`` variables.
    """
    if not argv and environ.get("GITHUB_ACTIONS") == "true":
        return ["report"]
    return list(argv)


# Click-compatible object for tooling that imports it
cli = get_command(create_app())


def main(argv: Sequence[str] | None = None) -> None:
    args = default_args(sys.argv[1:] if argv is None else argv, os.environ)
    try:
        cli.main(args=args, prog_name=PROG_NAME)
    except LcovReportError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise SystemExit(EXIT_GENERIC) from exc


__all__ = ["cli", "create_app", "default_args", "main"]
