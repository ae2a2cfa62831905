"""Exclusive, non-blocking lock guarding one install target."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import IO, Optional

from .errors import FilesystemError

if os.name == "nt":
    import msvcrt
else:
    import fcntl

logger = logging.getLogger(__name__)


class TargetLock:
    """Hold an OS-level lock on ``<directory>/<name>`` for the duration of a run.

    Acquisition never waits: a lock held by another process raises
    ``FilesystemError``.
    """

    def __init__(self, directory: Path, name: str):
        self.path = Path(directory) / name
        self._handle: Optional[IO[str]] = None

    def acquire(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(self.path, "a+", encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(f"Unable to create lock file {self.path}: {exc}") from exc

        try:
            if os.name == "nt":
                handle.seek(0)
                msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
            else:
                fcntl.flock(handle, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as exc:
            handle.close()
            raise FilesystemError(
                f"Another installer is already running against {self.path.parent}"
            ) from exc

        self._handle = handle
        logger.debug("Acquired lock %s", self.path)

    def release(self) -> None:
        if self._handle is None:
            return
        try:
            if os.name == "nt":
                self._handle.seek(0)
                msvcrt.locking(self._handle.fileno(), msvcrt.LK_UNLCK, 1)
            else:
                fcntl.flock(self._handle, fcntl.LOCK_UN)
        finally:
            self._handle.close()
            self._handle = None
        logger.debug("Released lock %s", self.path)

    def __enter__(self) -> "TargetLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
