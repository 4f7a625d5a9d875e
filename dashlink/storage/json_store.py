"""Whole-document JSON storage in the data directory."""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

from dashlink.exceptions import StorageError

logger = logging.getLogger(__name__)

_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(directory: Path) -> threading.RLock:
    """One re-entrant lock per data directory, shared across store instances."""
    key = directory.resolve()
    with _locks_guard:
        if key not in _locks:
            _locks[key] = threading.RLock()
        return _locks[key]


class JsonDocumentStore:
    """Reads and writes JSON documents as whole files.

    Every write replaces the file atomically, so a failed write leaves the
    previous document in place. Read-modify-write sequences must run inside
    ``transaction()`` to avoid lost updates between threads.
    """

    def __init__(self, data_dir: Path):
        """Initialize store rooted at ``data_dir``."""
        self.data_dir = data_dir
        self._lock = _lock_for(data_dir)

    def path(self, filename: str) -> Path:
        """Get path to a document."""
        return self.data_dir / filename

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Hold the data directory lock for a read-modify-write sequence."""
        with self._lock:
            yield

    def read(self, filename: str) -> dict[str, Any]:
        """
        Read a document.

        A missing or empty file reads as an empty document.

        Raises:
            StorageError: If the file cannot be read or is not a JSON object
        """
        path = self.path(filename)
        if not path.exists():
            return {}
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        if not content.strip():
            return {}
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {path}")
        return data

    def write(self, filename: str, data: dict[str, Any]) -> None:
        """
        Write a document atomically.

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self.path(filename)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.data_dir, prefix=f".{filename}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write {path}: {e}") from e
        logger.debug(f"Wrote {path}")
