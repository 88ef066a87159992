"""Recurring synchronization timer."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from collections.abc import Awaitable, Callable
from typing import Any

from mediatypes.exceptions import MediaTypesConfigError

_logger = logging.getLogger(__name__)


def validate_interval(interval: Any) -> float:
    """Return *interval* as seconds, or raise :class:`MediaTypesConfigError`.

    Any finite number is accepted; negative values mean "disabled".
    """
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise MediaTypesConfigError(f"Invalid update interval: {interval!r}")
    value = float(interval)
    if not math.isfinite(value):
        raise MediaTypesConfigError(f"Invalid update interval: {interval!r}")
    return value


class UpdateScheduler:
    """Runs *callback* every ``interval`` seconds while started.

    Two states: disabled (``interval < 0``) and running with an interval.
    Reconfiguring replaces the running timer immediately. Ticks never
    overlap: the next wait starts once the previous callback finished.
    Exceptions raised by a tick are passed to *on_error*.
    """

    def __init__(
        self,
        callback: Callable[[], Awaitable[Any]],
        *,
        on_error: Callable[[BaseException], Any],
        interval: float,
    ) -> None:
        self._callback = callback
        self._on_error = on_error
        self._interval = validate_interval(interval)
        self._started = False
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def enabled(self) -> bool:
        return self._interval >= 0

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def configure(self, interval: Any) -> None:
        """Change the interval, restarting the timer if the scheduler is started.

        Once started, this must be called from the event loop thread; the
        interval is left untouched otherwise.
        """
        value = validate_interval(interval)
        loop = asyncio.get_running_loop() if self._started else None
        self._interval = value
        if loop is not None:
            self._restart(loop)

    def start(self) -> None:
        """Start ticking on the running event loop (no-op when disabled)."""
        loop = asyncio.get_running_loop()
        self._started = True
        self._restart(loop)

    def stop(self) -> None:
        self._started = False
        self._cancel()

    async def aclose(self) -> None:
        """Stop and wait for the timer task to finish cancelling."""
        task = self._task
        self.stop()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    def _cancel(self) -> None:
        task = self._task
        self._task = None
        if task is not None and not task.done():
            task.cancel()

    def _restart(self, loop: asyncio.AbstractEventLoop) -> None:
        self._cancel()
        if not self.enabled:
            _logger.debug("Scheduled synchronization disabled")
            return
        self._task = loop.create_task(self._run(self._interval), name="mediatypes-scheduler")
        _logger.debug("Scheduled synchronization every %.3fs", self._interval)

    async def _run(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self._callback()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                _logger.debug("Scheduled synchronization failed", exc_info=True)
                self._on_error(exc)
