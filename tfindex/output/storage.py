"""Storage backends for index emission.

The emitter only talks to the Storage protocol, so tests can swap the
filesystem for MemoryStorage.
"""

import json
import os
import tempfile
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any, Protocol

from tfindex.indexer.exceptions import StorageWriteError


class Storage(Protocol):
    """Where emitted documents go."""

    def make_dirs(self, path: str) -> None:
        """Ensure a directory exists."""
        ...

    def write_json(self, path: str, data: Any) -> None:
        """Serialize ``data`` to ``path``; raises StorageWriteError on failure."""
        ...


class FileSystemStorage:
    """Writes UTF-8 JSON files to disk."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def make_dirs(self, path: str) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Failed to create directory {path}: {e}", {"path": path}) from e

    def write_json(self, path: str, data: Any) -> None:
        """Write via a sibling temp file and ``os.replace``.

        Concurrent writers to one path each replace the file whole, so the
        last replace wins and readers never see a partial document.
        """
        target = Path(path)
        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=self.indent, ensure_ascii=False)
                f.write("\n")
            # mkstemp creates owner-only files
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, target)
            tmp_name = None
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(f"Failed to write file {path}: {e}", {"path": path}) from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)


class MemoryStorage:
    """In-memory store keyed by path.

    ``fail_on`` is an optional predicate; a write whose path matches raises
    StorageWriteError, which lets tests exercise fail-fast emission.
    """

    def __init__(self, fail_on: Callable[[str], bool] | None = None):
        self.files: dict[str, Any] = {}
        self.dirs: set[str] = set()
        self.fail_on = fail_on
        self._lock = threading.Lock()

    def make_dirs(self, path: str) -> None:
        with self._lock:
            self.dirs.add(path)

    def write_json(self, path: str, data: Any) -> None:
        if self.fail_on is not None and self.fail_on(path):
            raise StorageWriteError(f"Failed to write file {path}: injected failure", {"path": path})
        # Round-trip through json so stored data matches what the disk backend writes
        document = json.loads(json.dumps(data))
        with self._lock:
            self.files[path] = document

    def read_json(self, path: str) -> Any:
        with self._lock:
            return self.files[path]
