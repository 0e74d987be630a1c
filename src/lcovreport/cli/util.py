"""Runtime helpers shared by CLI commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click.utils as click_utils
from rich.console import Console
from rich.markdown import Markdown

from lcovreport import logger
from lcovreport.config import LOG_FORMAT


def configure_runtime(*, quiet: bool, verbose: bool, debug: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose or debug else logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)

    if debug:
        logger.debug("debug mode active")


def is_tty_stdout() -> bool:
    try:
        return bool(getattr(sys.stdout, "isatty", lambda: False)())
    except OSError:
        return False


def resolve_use_color(*, color: bool, no_color: bool, color_allowed: bool) -> bool:
    # CLI flags take precedence over the IO policy default.
    if no_color:
        return False
    if color:
        return True
    return color_allowed


def color_allowed(destination: Path | None) -> bool:
    to_stdout = destination in {None, Path("-")}
    return bool(to_stdout and is_tty_stdout() and not click_utils.should_strip_ansi(sys.stdout))


def write_output(text: str, destination: Path | None, *, pretty: bool = False) -> None:
    """Write the report to stdout or a file (PATH or '-' for stdout).

    With *pretty* the Markdown is rendered for the terminal instead of
    printed verbatim.
    """
    if destination is None or destination == Path("-"):
        if pretty:
            Console().print(Markdown(text))
        else:
            sys.stdout.write(text)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text, encoding="utf-8")


__all__ = ["color_allowed", "configure_runtime", "is_tty_stdout", "resolve_use_color", "write_output"]
