"""Change record persistence.

The change record maps each shader path to the modification time its source
had when it was last compiled and written successfully. It is loaded at the
start of a run, updated in memory as outputs are written, and saved exactly
once at the end of the run, even when the run fails.

On disk the record is a small JSON document:

    {"version": 1, "modified_times": {"shaders/a.vert": 1700000000123456789}}

Timestamps are ``st_mtime_ns`` integers so equality survives the round trip.
Entries are never pruned.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from wrangler_core.errors import FilesystemError

logger = structlog.get_logger(__name__)

RECORD_FORMAT_VERSION = 1


def modified_time_ns(path: str | Path) -> int:
    """Return the modification time of ``path`` in nanoseconds.

    Raises:
        FilesystemError: If the file cannot be stat'ed.
    """
    try:
        return os.stat(path).st_mtime_ns
    except OSError as e:
        raise FilesystemError(path, "stat", internal_details=str(e)) from e


class ChangeRecord(BaseModel):
    """In-memory change record.

    Attributes:
        version: On-disk format version.
        modified_times: Path (posix form) to source mtime in nanoseconds.
    """

    model_config = ConfigDict(extra="forbid")

    version: int = Field(default=RECORD_FORMAT_VERSION)
    modified_times: dict[str, int] = Field(default_factory=dict)

    def get(self, path: str | Path) -> int | None:
        """Return the recorded mtime for ``path``, or None if never compiled."""
        return self.modified_times.get(Path(path).as_posix())

    def log(self, path: str | Path) -> int:
        """Record the current on-disk mtime of ``path``.

        Returns:
            The recorded mtime.

        Raises:
            FilesystemError: If the file cannot be stat'ed.
        """
        modified = modified_time_ns(path)
        self.modified_times[Path(path).as_posix()] = modified
        return modified

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return Path(path).as_posix() in self.modified_times

    def __len__(self) -> int:
        return len(self.modified_times)


class RecordStore:
    """Loads and saves the change record at a fixed location.

    Example:
        >>> store = RecordStore(Path("build/.wrangler-record.json"))
        >>> record = store.load()
        >>> record.log("shaders/a.vert")
        >>> store.save(record)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._log = logger.bind(component="record_store", record_path=str(self.path))

    def load(self) -> ChangeRecord:
        """Load the record, falling back to an empty one.

        A missing, unreadable, or corrupt record is never an error: the run
        simply starts fresh and recompiles everything.
        """
        if not self.path.exists():
            self._log.debug("record_missing")
            return ChangeRecord()

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            self._log.warning("record_unreadable", error=str(e))
            return ChangeRecord()

        try:
            record = ChangeRecord.model_validate_json(raw)
        except PydanticValidationError as e:
            self._log.warning("record_corrupt", error_count=e.error_count())
            return ChangeRecord()

        if record.version != RECORD_FORMAT_VERSION:
            self._log.warning("record_version_mismatch", version=record.version)
            return ChangeRecord()

        self._log.debug("record_loaded", entries=len(record))
        return record

    def save(self, record: ChangeRecord) -> None:
        """Write the record atomically, creating the parent directory.

        Raises:
            FilesystemError: If the record cannot be written.
        """
        parent = self.path.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(record.model_dump_json())
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise FilesystemError(self.path, "write", internal_details=str(e)) from e

        self._log.debug("record_saved", entries=len(record))

    def clear(self) -> bool:
        """Delete the record file. Returns True if a file was removed."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise FilesystemError(self.path, "delete", internal_details=str(e)) from e
        self._log.info("record_cleared")
        return True
