"""
Incremental CSV output.

One local file per page of the sites listing, named
``<runTimestamp>-<counter>.csv``.  Rows are appended as matches arrive;
``rollover()`` closes the current file (uploading it when enabled) and moves
on to the next counter.  A file that never received a row is neither
uploaded nor counted.
"""

import csv
from pathlib import Path
from typing import Protocol

from ..config import RESULT_DELIMITER, RESULT_EXTENSION
from ..errors import StorageError
from ..logging_setup import log
from ..models import MatchRecord


class Uploader(Protocol):
    def upload(self, local_path: Path, container: str | None = None) -> str: ...


class ResultSink:
    def __init__(
        self,
        output_dir: Path,
        run_timestamp: str,
        uploader: Uploader | None = None,
        container: str | None = None,
        write_header: bool = False,
        on_upload_error: str = "abort",
    ) -> None:
        self.output_dir = Path(output_dir)
        self.run_timestamp = run_timestamp
        self.uploader = uploader
        self.container = container
        self.write_header = write_header
        self.on_upload_error = on_upload_error

        self.counter = 1
        self.dirty = False
        self.rows_written = 0
        self.completed: list[Path] = []

    @property
    def current_path(self) -> Path:
        return self.output_dir / f"{self.run_timestamp}-{self.counter}{RESULT_EXTENSION}"

    def accept(self, record: MatchRecord) -> None:
        path = self.current_path
        new_file = not path.exists()
        if new_file:
            path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh, delimiter=RESULT_DELIMITER)
            if new_file and self.write_header:
                writer.writerow(MatchRecord.HEADER)
            writer.writerow(record.as_row())
        self.dirty = True
        self.rows_written += 1
        log.debug("Row written to %s: %s / %s", path.name, record.site_name, record.page_name)

    def rollover(self) -> Path | None:
        """Finish the current file. Returns its path, or None when it was empty."""
        if not self.dirty:
            return None
        path = self.current_path
        if self.uploader is not None:
            try:
                self.uploader.upload(path, self.container)
            except StorageError as exc:
                if self.on_upload_error == "abort":
                    raise
                log.error("Upload failed, keeping local copy %s: %s", path, exc)
        log.info("Result file complete: %s", path)
        self.completed.append(path)
        self.counter += 1
        self.dirty = False
        return path
