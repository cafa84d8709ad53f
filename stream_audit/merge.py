"""Concatenation of finished result files into one CSV with a single header."""

from datetime import datetime
from pathlib import Path

from .config import RESULT_EXTENSION, RUN_TIMESTAMP_FORMAT
from .errors import NotFoundError
from .logging_setup import log


def default_output(folder: Path) -> Path:
    return folder / f"merged-{datetime.now().strftime(RUN_TIMESTAMP_FORMAT)}{RESULT_EXTENSION}"


def merge_csv_files(folder: Path, output: Path | None = None) -> Path:
    """
    Merge every ``*.csv`` file in *folder* into *output*.

    The first file's header line is written once; every file then contributes
    all of its lines except its first.  Files are taken in sorted filename
    order.  Headers are not compared across files.
    """
    folder = Path(folder)
    output = Path(output) if output is not None else default_output(folder)
    if output.exists():
        raise NotFoundError(f"Merge target already exists: {output}")

    inputs = sorted(
        p for p in folder.glob(f"*{RESULT_EXTENSION}")
        if p.is_file() and p.resolve() != output.resolve()
    )
    if not inputs:
        raise NotFoundError(f"No {RESULT_EXTENSION} files found in {folder}")

    output.parent.mkdir(parents=True, exist_ok=True)
    rows = 0
    with output.open("w", encoding="utf-8", newline="") as out:
        for index, path in enumerate(inputs):
            with path.open(encoding="utf-8", newline="") as fh:
                lines = _split_lines(fh.read())
            if not lines:
                log.debug("Empty input skipped: %s", path.name)
                continue
            if index == 0 or out.tell() == 0:
                out.write(_terminated(lines[0]))
            for line in lines[1:]:
                out.write(_terminated(line))
                rows += 1
            log.debug("Merged %s (%d line(s))", path.name, len(lines) - 1)

    log.info("Merged %d file(s), %d data line(s) → %s", len(inputs), rows, output)
    return output


def _split_lines(text: str) -> list[str]:
    r"""
    Split *text* on ``"\n"`` only, keeping the terminators.

    Unlike ``str.splitlines()`` this leaves ``"\r"``, ``"\x0c"``, U+2028 and the
    other Unicode line boundaries inside quoted fields untouched.
    """
    lines = text.split("\n")
    tail = lines.pop()
    lines = [line + "\n" for line in lines]
    if tail:
        lines.append(tail)
    return lines


def _terminated(line: str) -> str:
    return line if line.endswith("\n") else line + "\n"
