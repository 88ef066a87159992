"""Custom exception hierarchy for mediatypes."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class MediaTypesError(Exception):
    """Base exception for all mediatypes errors."""


class MediaTypesConfigError(MediaTypesError):
    """Invalid configuration (e.g. a non-finite update interval)."""


class InvalidArgumentTypeError(MediaTypesError, TypeError):
    """A public operation received an argument of the wrong type."""

    def __init__(self, message: str, *, argument: str) -> None:
        self.argument = argument
        super().__init__(message)


class InvalidArgumentSyntaxError(MediaTypesError, ValueError):
    """An extension or media type argument is syntactically malformed."""

    def __init__(self, message: str, *, argument: str, value: Any = None) -> None:
        self.argument = argument
        self.value = value
        super().__init__(message)


class InvalidArgumentsError(ExceptionGroup):
    """Several arguments of one call are invalid at once.

    Wraps one :class:`InvalidArgumentTypeError` or
    :class:`InvalidArgumentSyntaxError` per offending argument so callers can
    inspect every violation instead of only the first one.
    """

    def derive(self, excs: Sequence[Exception]) -> InvalidArgumentsError:  # type: ignore[override]
        return InvalidArgumentsError(self.message, excs)


class MediaTypesTransportError(MediaTypesError):
    """HTTP-level failure (network error, timeout, non-200 status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class MediaTypesParseError(MediaTypesError):
    """An upstream document did not yield a single valid association."""


class MediaTypesStorageError(MediaTypesError):
    """The registry snapshot could not be written."""
