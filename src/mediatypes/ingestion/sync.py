"""Conditional fetch of every upstream registry and merge into the store.

Each source is probed with ``HEAD``; only when its version token changed
(or ``force`` is set, or the source was never synchronized) is the body
downloaded and parsed. Sources are independent: a failing source is logged
and skipped, the others still contribute.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from mediatypes._constants import VERSION_HEADER
from mediatypes._transport import HttpResponse, Transport
from mediatypes.exceptions import MediaTypesError, MediaTypesParseError, MediaTypesTransportError
from mediatypes.ingestion.parsers import PARSERS
from mediatypes.ingestion.sources import SourceSpec
from mediatypes.models.fragment import ParsedFragment
from mediatypes.state.events import NotificationChannel, Notifier
from mediatypes.state.store import Delta, RegistryStore

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceOutcome:
    """What one source contributed to a synchronization cycle."""

    spec: SourceSpec
    fragment: ParsedFragment | None = None
    error: BaseException | None = None

    @property
    def accepted(self) -> bool:
        return self.fragment is not None


def _require_ok(response: HttpResponse, method: str, url: str) -> HttpResponse:
    if response.status != 200:
        raise MediaTypesTransportError(
            f"HTTP {response.status} from {method} {url}",
            status_code=response.status,
            url=url,
        )
    return response


async def fetch_source(
    transport: Transport,
    spec: SourceSpec,
    known_version: str,
    *,
    force: bool = False,
) -> HttpResponse | None:
    """Probe *spec* and download it when needed.

    Returns ``None`` when the probe shows the known version is current.
    Raises :class:`MediaTypesTransportError` on network failure or any
    non-200 status.
    """
    probe = _require_ok(await transport.request("HEAD", spec.url), "HEAD", spec.url)
    remote_version = probe.header(VERSION_HEADER) or ""

    if not force and known_version and remote_version == known_version:
        _logger.debug("%s unchanged (version %s)", spec.source, known_version)
        return None

    return _require_ok(await transport.request("GET", spec.url), "GET", spec.url)


def load_fragment(spec: SourceSpec, response: HttpResponse) -> ParsedFragment:
    """Parse a downloaded body with the parser registered for its source."""
    version = response.header(VERSION_HEADER) or ""
    if not version:
        raise MediaTypesParseError(f"{spec.source} response carries no {VERSION_HEADER} header")
    fragment = PARSERS[spec.source](response.body, version)
    if not fragment.is_useful:
        raise MediaTypesParseError(f"{spec.source} response yielded no usable content")
    return fragment


class Synchronizer:
    """Brings the store up to date with the configured sources."""

    def __init__(
        self,
        transport: Transport,
        store: RegistryStore,
        notifier: Notifier,
        sources: Sequence[SourceSpec],
    ) -> None:
        self._transport = transport
        self._store = store
        self._notifier = notifier
        self._sources = tuple(sources)

    @property
    def sources(self) -> tuple[SourceSpec, ...]:
        return self._sources

    async def _collect(self, spec: SourceSpec, force: bool) -> SourceOutcome:
        try:
            response = await fetch_source(self._transport, spec, self._store.version(spec.source), force=force)
            if response is None:
                return SourceOutcome(spec)
            return SourceOutcome(spec, fragment=load_fragment(spec, response))
        except MediaTypesError as exc:
            _logger.warning("Skipping %s for this cycle: %s", spec.source, exc)
            return SourceOutcome(spec, error=exc)

    async def collect(self, *, force: bool = False) -> list[SourceOutcome]:
        """Probe, download and parse every source concurrently."""
        results = await asyncio.gather(
            *(self._collect(spec, force) for spec in self._sources),
            return_exceptions=True,
        )
        outcomes: list[SourceOutcome] = []
        for spec, result in zip(self._sources, results, strict=True):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                _logger.warning("Skipping %s for this cycle", spec.source, exc_info=result)
                outcomes.append(SourceOutcome(spec, error=result))
            else:
                outcomes.append(result)
        return outcomes

    def apply(self, outcomes: Sequence[SourceOutcome]) -> Delta:
        """Merge accepted fragments in source order and persist once.

        Raises :class:`~mediatypes.exceptions.MediaTypesStorageError` when
        the snapshot cannot be written.
        """
        accepted = [(outcome.spec.source, outcome.fragment) for outcome in outcomes if outcome.fragment is not None]
        if not accepted:
            return {}
        return self._store.apply_fragments(accepted)

    async def synchronize(self, *, force: bool = False) -> Delta:
        """Run one synchronization cycle and return the newly added associations."""
        outcomes = await self.collect(force=force)
        delta = self.apply(outcomes)
        if delta:
            self._notifier.emit(NotificationChannel.UPDATE, delta)
        return delta
