from __future__ import annotations

from pathlib import Path

import pytest

from mediatypes._storage import FileBlobStorage, MemoryBlobStorage


def test_file_storage_round_trip(tmp_path: Path) -> None:
    storage = FileBlobStorage(tmp_path / "nested" / "dir")

    assert storage.read("snapshot.json") is None

    storage.write("snapshot.json", b'{"registry": {}}')
    storage.write("snapshot.json", b'{"registry": {"txt": ["text/plain"]}}')

    assert storage.read("snapshot.json") == b'{"registry": {"txt": ["text/plain"]}}'
    assert [path.name for path in storage.directory.iterdir()] == ["snapshot.json"]


def test_file_storage_write_failure_raises(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")
    storage = FileBlobStorage(blocker)

    with pytest.raises(OSError):
        storage.write("snapshot.json", b"{}")


def test_memory_storage_copies_initial_blobs() -> None:
    initial = {"a": b"1"}
    storage = MemoryBlobStorage(initial)
    storage.write("b", b"2")

    assert storage.read("a") == b"1"
    assert storage.read("b") == b"2"
    assert "b" not in initial
