"""Change and failure notifications.

The synchronizer announces non-empty deltas on ``update``; failures of
cycles nobody awaits (scheduled ticks, async listeners) go to ``error``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

_logger = logging.getLogger(__name__)

Listener = Callable[[Any], Any]


class NotificationChannel(StrEnum):
    UPDATE = "update"
    ERROR = "error"


@dataclass(slots=True)
class _Subscription:
    listener: Listener
    once: bool = False


class Notifier:
    """Publish/subscribe point with an ``update`` and an ``error`` channel.

    Listeners are called in subscription order with a single payload. A
    listener may be a coroutine function; its coroutine is scheduled on the
    running loop. Exceptions raised by ``update`` listeners, sync or async,
    are re-emitted on ``error``.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[NotificationChannel, list[_Subscription]] = {
            channel: [] for channel in NotificationChannel
        }
        self._pending: set[asyncio.Task[Any]] = set()

    def on(self, channel: NotificationChannel | str, listener: Listener) -> Callable[[], None]:
        """Subscribe *listener*; return a callable that unsubscribes it."""
        return self._subscribe(NotificationChannel(channel), _Subscription(listener))

    def once(self, channel: NotificationChannel | str, listener: Listener) -> Callable[[], None]:
        """Subscribe *listener* for the next notification only."""
        return self._subscribe(NotificationChannel(channel), _Subscription(listener, once=True))

    def _subscribe(self, channel: NotificationChannel, subscription: _Subscription) -> Callable[[], None]:
        self._subscriptions[channel].append(subscription)

        def _unsubscribe() -> None:
            subscriptions = self._subscriptions[channel]
            for index, candidate in enumerate(subscriptions):
                if candidate is subscription:
                    del subscriptions[index]
                    return

        return _unsubscribe

    def off(self, channel: NotificationChannel | str, listener: Listener) -> None:
        """Remove the most recently added subscription of *listener*."""
        subscriptions = self._subscriptions[NotificationChannel(channel)]
        for index in range(len(subscriptions) - 1, -1, -1):
            if subscriptions[index].listener == listener:
                del subscriptions[index]
                return

    def listener_count(self, channel: NotificationChannel | str) -> int:
        return len(self._subscriptions[NotificationChannel(channel)])

    def remove_all_listeners(self, channel: NotificationChannel | str | None = None) -> None:
        channels = list(NotificationChannel) if channel is None else [NotificationChannel(channel)]
        for resolved in channels:
            self._subscriptions[resolved].clear()

    def emit(self, channel: NotificationChannel | str, payload: Any) -> bool:
        """Call every listener of *channel*; return whether any was registered."""
        resolved = NotificationChannel(channel)
        subscriptions = list(self._subscriptions[resolved])

        if not subscriptions:
            if resolved is NotificationChannel.ERROR:
                _logger.error("Unhandled mediatypes failure", exc_info=_exc_info(payload))
            return False

        fired = {id(sub) for sub in subscriptions if sub.once}
        if fired:
            self._subscriptions[resolved] = [sub for sub in self._subscriptions[resolved] if id(sub) not in fired]

        for subscription in subscriptions:
            try:
                result = subscription.listener(payload)
                if inspect.isawaitable(result):
                    self._schedule(resolved, result)
            except Exception as exc:
                self._listener_failed(resolved, exc)
        return True

    def emit_error(self, error: BaseException) -> bool:
        return self.emit(NotificationChannel.ERROR, error)

    def _schedule(self, channel: NotificationChannel, awaitable: Any) -> None:
        task = asyncio.ensure_future(awaitable)
        self._pending.add(task)

        def _done(done: asyncio.Task[Any]) -> None:
            self._pending.discard(done)
            if done.cancelled():
                return
            exc = done.exception()
            if exc is not None:
                self._listener_failed(channel, exc)

        task.add_done_callback(_done)

    def _listener_failed(self, channel: NotificationChannel, exc: BaseException) -> None:
        if channel is NotificationChannel.UPDATE:
            self.emit_error(exc)
        else:
            _logger.error("Error listener raised", exc_info=_exc_info(exc))


def _exc_info(payload: Any) -> Any:
    if isinstance(payload, BaseException):
        return (type(payload), payload, payload.__traceback__)
    return False
