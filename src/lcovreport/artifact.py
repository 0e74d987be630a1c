"""HTML coverage artifact generated with ``genhtml``."""

from __future__ import annotations

import shutil
import subprocess
import uuid
from dataclasses import dataclass
from pathlib import Path

from lcovreport import logger
from lcovreport.errors import ArtifactError

GENHTML = "genhtml"


@dataclass(frozen=True, slots=True)
class HtmlArtifact:
    """Directory of generated HTML files, ready for the CI system to store."""

    name: str
    directory: Path
    files: tuple[Path, ...]


def build_html_report(
    lcov_file: Path,
    *,
    name: str,
    working_directory: Path,
    output_root: Path | None = None,
) -> HtmlArtifact:
    """Run ``genhtml`` on *lcov_file* into a fresh directory under *output_root*."""
    executable = shutil.which(GENHTML)
    if executable is None:
        msg = f"{GENHTML} not found on PATH; install lcov to build the HTML artifact"
        raise ArtifactError(msg)

    root = (output_root or Path.cwd()).resolve()
    directory = root / f"{name}-{uuid.uuid4()}"
    cmd = [executable, str(lcov_file), "-o", str(directory)]
    logger.debug("running %s in %s", " ".join(cmd), working_directory)
    try:
        proc = subprocess.run(  # noqa: S603
            cmd,
            cwd=working_directory,
            check=False,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
        )
    except OSError as exc:
        msg = f"failed to invoke {GENHTML}: {exc}"
        raise ArtifactError(msg) from exc
    if proc.returncode != 0:
        msg = f"{GENHTML} exited with {proc.returncode}: {proc.stdout.strip()}"
        raise ArtifactError(msg)

    files = tuple(sorted(p for p in directory.rglob("*.*") if p.is_file()))
    logger.info("Generated %d HTML file(s) for artifact %r in %s", len(files), name, directory)
    return HtmlArtifact(name=name, directory=directory, files=files)


__all__ = ["HtmlArtifact", "build_html_report"]
