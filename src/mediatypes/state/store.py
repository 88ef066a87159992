"""Canonical extension -> media type registry.

This is the only component allowed to mutate the registry and the
per-source version tokens, and the only one that persists them.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from mediatypes._arguments import require_pair
from mediatypes._grammar import is_valid_extension
from mediatypes._storage import BlobStorage
from mediatypes.exceptions import MediaTypesStorageError
from mediatypes.ingestion.sources import Source
from mediatypes.models.fragment import ParsedFragment
from mediatypes.models.media_type import MediaType
from mediatypes.models.snapshot import RegistrySnapshot

_logger = logging.getLogger(__name__)

Registry = dict[str, list[MediaType]]
Delta = dict[str, list[MediaType]]

_SOURCE_IDS = frozenset(source.value for source in Source)


def _sort_key(media_type: MediaType) -> str:
    return str(media_type)


def _dedupe(media_types: Iterable[MediaType]) -> list[MediaType]:
    seen: set[str] = set()
    result: list[MediaType] = []
    for media_type in media_types:
        if media_type.essence in seen:
            continue
        seen.add(media_type.essence)
        result.append(media_type)
    return result


def _blank_versions() -> dict[Source, str]:
    return {source: "" for source in Source}


def _registry_from_snapshot(snapshot: RegistrySnapshot) -> Registry:
    """Rebuild the registry, dropping entries that fail validation."""
    registry: Registry = {}
    for extension, raw_types in snapshot.registry.items():
        if not is_valid_extension(extension):
            _logger.debug("Dropping invalid extension %r from snapshot", extension)
            continue
        parsed: list[MediaType] = []
        for raw in raw_types:
            try:
                parsed.append(MediaType.parse(raw))
            except ValueError:
                _logger.debug("Dropping invalid media type %r for %r from snapshot", raw, extension)
        parsed = _dedupe(parsed)
        if parsed:
            registry[extension.lower()] = parsed
    return registry


class RegistryStore:
    """In-memory registry backed by a persisted snapshot.

    Merges are deterministic: media types are compared by essence, an
    extension seen for the first time keeps the incoming order, and later
    additions are appended and the list re-sorted.
    """

    def __init__(
        self,
        storage: BlobStorage,
        *,
        snapshot_name: str,
        registry: Registry | None = None,
        versions: Mapping[Source, str] | None = None,
    ) -> None:
        self._storage = storage
        self._snapshot_name = snapshot_name
        self._registry: Registry = registry if registry is not None else {}
        self._versions: dict[Source, str] = _blank_versions()
        if versions:
            self._versions.update(versions)
        self._lock = threading.RLock()

    @classmethod
    def from_storage(cls, storage: BlobStorage, *, snapshot_name: str) -> RegistryStore:
        """Load the store from *storage*.

        A missing, unreadable or malformed snapshot yields an empty registry
        with blank version tokens.
        """
        try:
            raw = storage.read(snapshot_name)
        except OSError:
            _logger.warning("Could not read snapshot %r, starting empty", snapshot_name, exc_info=True)
            raw = None

        if not raw:
            return cls(storage, snapshot_name=snapshot_name)

        try:
            snapshot = RegistrySnapshot.model_validate_json(raw)
        except (ValidationError, ValueError):
            _logger.debug("Malformed snapshot %r, starting empty", snapshot_name, exc_info=True)
            return cls(storage, snapshot_name=snapshot_name)

        versions = {
            Source(key): token for key, token in snapshot.versions.items() if key in _SOURCE_IDS
        }
        return cls(
            storage,
            snapshot_name=snapshot_name,
            registry=_registry_from_snapshot(snapshot),
            versions=versions,
        )

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def registry(self) -> Registry:
        with self._lock:
            return {extension: list(types) for extension, types in self._registry.items()}

    @property
    def versions(self) -> dict[Source, str]:
        with self._lock:
            return dict(self._versions)

    def version(self, source: Source) -> str:
        with self._lock:
            return self._versions.get(source, "")

    def lookup(self, extension: str) -> list[MediaType]:
        with self._lock:
            return list(self._registry.get(extension.lower(), ()))

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            return RegistrySnapshot(
                registry={ext: [str(mt) for mt in types] for ext, types in self._registry.items()},
                versions={str(source): token for source, token in self._versions.items()},
            )

    # ------------------------------------------------------------------
    # Mutation (no persistence)
    # ------------------------------------------------------------------

    def merge(self, extension: str, media_types: Iterable[MediaType]) -> list[MediaType]:
        """Merge *media_types* into *extension*; return the ones actually added."""
        extension = extension.strip().lower()
        incoming = _dedupe(media_types)
        if not incoming:
            return []

        with self._lock:
            existing = self._registry.get(extension)
            if existing is None:
                self._registry[extension] = list(incoming)
                return list(incoming)

            known = {media_type.essence for media_type in existing}
            added = [media_type for media_type in incoming if media_type.essence not in known]
            if added:
                self._registry[extension] = sorted(existing + added, key=_sort_key)
            return added

    def merge_content(self, content: Mapping[str, Iterable[MediaType]]) -> Delta:
        """Merge a whole parsed fragment; return the per-extension additions."""
        delta: Delta = {}
        with self._lock:
            for extension, media_types in content.items():
                added = self.merge(extension, media_types)
                if added:
                    delta.setdefault(extension.strip().lower(), []).extend(added)
        return delta

    def set_version(self, source: Source, token: str) -> None:
        with self._lock:
            self._versions[source] = token

    def apply_fragments(self, fragments: Iterable[tuple[Source, ParsedFragment]]) -> Delta:
        """Merge accepted fragments in order, record their versions and persist.

        Nothing is written when *fragments* is empty. When the write fails
        the registry and version tokens are restored before the error
        propagates.
        """
        delta: Delta = {}
        applied = 0
        with self._lock:
            checkpoint = self._checkpoint()
            for source, fragment in fragments:
                added = self.merge_content(fragment.content)
                self._versions[source] = fragment.version
                applied += 1
                for extension, media_types in added.items():
                    delta.setdefault(extension, []).extend(media_types)
                _logger.debug("%s at version %s added %d extensions", source, fragment.version, len(added))
            if applied:
                self._commit(checkpoint)
        return delta

    # ------------------------------------------------------------------
    # Manual edits (validated, persisted)
    # ------------------------------------------------------------------

    def set_one(self, extension: Any, media_type: Any) -> bool:
        """Associate *media_type* with *extension*.

        Returns ``True`` when a new association was created and persisted,
        ``False`` when an essence-equal media type was already present.
        A failed write leaves the registry unchanged.
        """
        ext, parsed = require_pair(extension, media_type)
        with self._lock:
            checkpoint = self._checkpoint()
            if not self.merge(ext, [parsed]):
                return False
            self._commit(checkpoint)
        return True

    def delete_one(self, extension: Any, media_type: Any) -> bool:
        """Remove the *extension*/*media_type* association, compared by essence.

        Drops the extension entirely once its last media type is removed.
        Returns whether anything was removed.
        """
        ext, parsed = require_pair(extension, media_type)
        with self._lock:
            existing = self._registry.get(ext)
            if not existing:
                return False
            remaining = [mt for mt in existing if mt.essence != parsed.essence]
            if len(remaining) == len(existing):
                return False
            checkpoint = self._checkpoint()
            if remaining:
                self._registry[ext] = remaining
            else:
                del self._registry[ext]
            self._commit(checkpoint)
        return True

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist(self) -> None:
        """Write the full registry and version map to storage."""
        with self._lock:
            data = self.snapshot().model_dump_json().encode("utf-8")
            try:
                self._storage.write(self._snapshot_name, data)
            except OSError as exc:
                raise MediaTypesStorageError(f"Could not write snapshot {self._snapshot_name!r}: {exc}") from exc
        _logger.debug("Persisted %d extensions", len(self._registry))

    def _checkpoint(self) -> tuple[Registry, dict[Source, str]]:
        return self.registry, self.versions

    def _commit(self, checkpoint: tuple[Registry, dict[Source, str]]) -> None:
        """Persist, or restore *checkpoint* and re-raise when the write fails."""
        try:
            self.persist()
        except MediaTypesStorageError:
            self._registry, self._versions = checkpoint
            raise
