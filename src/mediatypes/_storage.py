"""Blob storage for the registry snapshot."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)


class BlobStorage(Protocol):
    """Structural storage interface used by the registry store.

    A blob is a byte string addressed by name. ``read`` returns ``None`` for
    a blob that was never written.
    """

    def read(self, name: str) -> bytes | None:
        ...

    def write(self, name: str, data: bytes) -> None:
        ...


class FileBlobStorage:
    """Stores each blob as a file inside one directory.

    Writes go through a temporary file in the same directory followed by an
    atomic rename, so a crash never leaves a truncated snapshot behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def read(self, name: str) -> bytes | None:
        path = self._directory / name
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def write(self, name: str, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", dir=self._directory)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self._directory / name)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        _logger.debug("Wrote %d bytes to %s", len(data), self._directory / name)


class MemoryBlobStorage:
    """In-memory storage, not persisted across processes."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._blobs: dict[str, bytes] = dict(initial) if initial else {}

    def read(self, name: str) -> bytes | None:
        return self._blobs.get(name)

    def write(self, name: str, data: bytes) -> None:
        self._blobs[name] = bytes(data)
