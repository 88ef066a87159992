"""High-level registry of file extensions and their media types."""

from __future__ import annotations

import logging
import posixpath
import re
from collections.abc import Callable
from typing import Any

import aiohttp

from mediatypes._arguments import require_extension
from mediatypes._grammar import MEDIA_TYPE_PATTERN
from mediatypes._scheduler import UpdateScheduler
from mediatypes._storage import BlobStorage, FileBlobStorage
from mediatypes._transport import AiohttpTransport, Transport
from mediatypes.config import MediaTypesConfig
from mediatypes.exceptions import InvalidArgumentTypeError, MediaTypesError
from mediatypes.ingestion.sync import Synchronizer
from mediatypes.models.media_type import MediaType
from mediatypes.state.events import Listener, NotificationChannel, Notifier
from mediatypes.state.store import Delta, Registry, RegistryStore

_logger = logging.getLogger(__name__)


def _extension_of(path: str) -> str:
    """Text after the last dot of the basename; dot files have none."""
    _, ext = posixpath.splitext(posixpath.basename(path.replace("\\", "/")))
    return ext[1:].strip()


class MediaTypes:
    """Extension to media type registry kept in sync with Apache, Debian and NGINX.

    The registry is loaded from the snapshot on construction, so lookups and
    manual edits work right away. Synchronization needs a transport; inside
    ``async with`` one is created from an aiohttp session and the periodic
    scheduler is started.

    Usage::

        async with MediaTypes(MediaTypesConfig.from_env()) as media_types:
            media_types.on("update", print)
            await media_types.synchronize()
            media_types.lookup("photo.jpg")
    """

    def __init__(
        self,
        config: MediaTypesConfig | None = None,
        *,
        storage: BlobStorage | None = None,
        transport: Transport | None = None,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config or MediaTypesConfig()
        self._storage = storage if storage is not None else FileBlobStorage(self._config.data_path)
        self._store = RegistryStore.from_storage(self._storage, snapshot_name=self._config.snapshot_name)
        self._notifier = Notifier()
        self._scheduler = UpdateScheduler(
            self._scheduled_synchronize,
            on_error=self._notifier.emit_error,
            interval=self._config.update_interval,
        )
        self._external_session = session is not None
        self._http_session = session
        self._owns_transport = transport is None
        self._synchronizer: Synchronizer | None = None
        if transport is not None:
            self._synchronizer = self._build_synchronizer(transport)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MediaTypes:
        if self._synchronizer is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = AiohttpTransport(
                self._http_session,
                timeout=self._config.request_timeout,
                user_agent=self._config.user_agent,
            )
            self._synchronizer = self._build_synchronizer(transport)
        self._scheduler.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._scheduler.aclose()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_transport:
            self._synchronizer = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_synchronizer(self, transport: Transport) -> Synchronizer:
        return Synchronizer(transport, self._store, self._notifier, self._config.sources())

    def _require_synchronizer(self) -> Synchronizer:
        if self._synchronizer is None:
            raise MediaTypesError("Registry not started. Use 'async with MediaTypes(...) as media_types:'")
        return self._synchronizer

    async def _scheduled_synchronize(self) -> None:
        _logger.debug("Scheduled synchronization starting")
        await self.synchronize(force=False)

    # ------------------------------------------------------------------
    # Attributes
    # ------------------------------------------------------------------

    @property
    def config(self) -> MediaTypesConfig:
        return self._config

    @property
    def registry(self) -> Registry:
        """Copy of the full registry, extension to media types."""
        return self._store.registry

    @property
    def versions(self) -> dict[str, str]:
        """Last accepted version token per source (``""`` if never synchronized)."""
        return {str(source): token for source, token in self._store.versions.items()}

    @property
    def pattern(self) -> re.Pattern[str]:
        """Compiled media type grammar used for validation."""
        return MEDIA_TYPE_PATTERN

    @property
    def update_interval(self) -> float:
        """Seconds between scheduled synchronizations; negative when disabled."""
        return self._scheduler.interval

    @update_interval.setter
    def update_interval(self, seconds: float) -> None:
        self.configure_interval(seconds)

    def configure_interval(self, seconds: float) -> None:
        """Reconfigure the scheduler; takes effect immediately.

        Raises
        ------
        MediaTypesConfigError
            If *seconds* is not a finite number. Nothing is changed.
        """
        self._scheduler.configure(seconds)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def synchronize(self, force: bool = False) -> Delta:
        """Fetch changed sources and merge them into the registry.

        Parameters
        ----------
        force : bool
            Download every reachable source even when its version token
            is unchanged.

        Returns
        -------
        dict
            Extension to newly added media types; empty when nothing changed.

        Raises
        ------
        MediaTypesStorageError
            If the registry changed but the snapshot could not be written.
        """
        return await self._require_synchronizer().synchronize(force=bool(force))

    def lookup(self, path: Any) -> list[MediaType]:
        """Media types registered for the extension of *path*.

        Raises
        ------
        InvalidArgumentTypeError
            If *path* is not a string.
        InvalidArgumentSyntaxError
            If *path* has no extension or the extension is malformed.
        """
        if not isinstance(path, str):
            raise InvalidArgumentTypeError(
                f"Invalid path: expected str, got {type(path).__name__}",
                argument="path",
            )
        extension = require_extension(_extension_of(path))
        return self._store.lookup(extension)

    def set_one(self, extension: Any, media_type: Any) -> bool:
        """Associate *media_type* with *extension*; ``False`` if already present."""
        return self._store.set_one(extension, media_type)

    def delete_one(self, extension: Any, media_type: Any) -> bool:
        """Remove the association; ``False`` if it did not exist."""
        return self._store.delete_one(extension, media_type)

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def on(self, channel: NotificationChannel | str, listener: Listener) -> Callable[[], None]:
        return self._notifier.on(channel, listener)

    def once(self, channel: NotificationChannel | str, listener: Listener) -> Callable[[], None]:
        return self._notifier.once(channel, listener)

    def off(self, channel: NotificationChannel | str, listener: Listener) -> None:
        self._notifier.off(channel, listener)

    def listener_count(self, channel: NotificationChannel | str) -> int:
        return self._notifier.listener_count(channel)

    def remove_all_listeners(self, channel: NotificationChannel | str | None = None) -> None:
        self._notifier.remove_all_listeners(channel)
