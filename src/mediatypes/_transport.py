"""HTTP transport used to probe and download upstream registries."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

import aiohttp

from mediatypes.exceptions import MediaTypesTransportError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status, headers and decoded body of one upstream response."""

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        value = self.headers.get(name)
        if value is not None:
            return value
        lowered = name.lower()
        for key, candidate in self.headers.items():
            if key.lower() == lowered:
                return candidate
        return None


class Transport(Protocol):
    """Structural transport interface used by the synchronizer.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`AiohttpTransport`) concrete.
    """

    async def request(self, method: str, url: str) -> HttpResponse:
        ...


class AiohttpTransport:
    """Transport backed by an :class:`aiohttp.ClientSession`.

    Non-200 responses are returned as is; only network-level failures and
    timeouts are raised, as :class:`MediaTypesTransportError`.
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float,
        user_agent: str,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._user_agent = user_agent

    async def request(self, method: str, url: str) -> HttpResponse:
        headers = {
            "accept-encoding": "identity",
            "user-agent": self._user_agent,
        }

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(method, url, headers=headers, timeout=self._timeout) as resp:
                body = "" if method.upper() == "HEAD" else await resp.text()
                return HttpResponse(status=resp.status, headers=dict(resp.headers), body=body)
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise MediaTypesTransportError(f"{method} {url} failed: {exc!r}", url=url) from exc
