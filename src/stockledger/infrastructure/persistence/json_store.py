"""Locked, atomic access to the JSON store file.

The lock is an advisory ``fcntl`` lock on a sibling ``.lock`` file, so it
serialises writers across processes as well as across threads that open
the store independently.  Writes go to a temp file in the same directory
and are swapped in with ``os.replace``; readers never see half a document.
"""

from __future__ import annotations

import json
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Any, Iterator

_HAS_FCNTL = os.name != "nt"
if _HAS_FCNTL:  # pragma: no cover - fcntl unavailable on Windows
    import fcntl

_THREAD_LOCKS: dict[str, Lock] = {}


def lock_path_for(target: Path) -> Path:
    return target.with_name(f".{target.name}.lock")


@contextmanager
def exclusive_lock(target: Path) -> Iterator[None]:
    """Hold an exclusive lock on ``target`` for the duration of the block."""
    lock_path = lock_path_for(target)
    lock_path.parent.mkdir(parents=True, exist_ok=True)

    if _HAS_FCNTL:
        fd = os.open(lock_path, os.O_CREAT | os.O_RDWR, 0o666)
        try:
            fcntl.flock(fd, fcntl.LOCK_EX)
            yield
        finally:
            try:
                fcntl.flock(fd, fcntl.LOCK_UN)
            finally:
                os.close(fd)
    else:  # pragma: no cover - non-POSIX fallback, threads only
        lock = _THREAD_LOCKS.setdefault(str(lock_path.resolve()), Lock())
        with lock:
            yield


def read_document(target: Path) -> dict[str, Any]:
    """Load the store, returning an empty document when it does not exist yet."""
    if not target.exists():
        return {}
    text = target.read_text(encoding="utf-8")
    return json.loads(text) if text.strip() else {}


def write_document(target: Path, document: dict[str, Any]) -> None:
    """Atomically replace the store with ``document``."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=str(target.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(document, tmp, indent=2)
            tmp.write("\n")
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp_name, target)
    finally:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
