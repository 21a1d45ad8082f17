"""Atomic JSON persistence for fixtures and configuration files."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

_path_locks: dict[Path, threading.RLock] = {}
_path_locks_guard = threading.Lock()


@contextmanager
def locked_path(path: Path) -> Iterator[None]:
    """Serialize readers and writers of one file within this process."""
    resolved = path.resolve()
    with _path_locks_guard:
        lock = _path_locks.setdefault(resolved, threading.RLock())
    with lock:
        yield


def atomic_write_json(path: Path, payload: Any, *, indent: int | None = 2) -> None:
    """Write ``payload`` to a sibling temp file, then replace ``path`` with it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = json.dumps(payload, indent=indent, ensure_ascii=False)
    with locked_path(path):
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, path)
        finally:
            tmp_path.unlink(missing_ok=True)


def read_json(path: Path) -> Any:
    with locked_path(path):
        with path.open("r", encoding="utf-8") as fh:
            return json.load(fh)
