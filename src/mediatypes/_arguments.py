"""Argument checks shared by the public registry operations."""

from __future__ import annotations

from typing import Any

from mediatypes._grammar import is_valid_extension
from mediatypes.exceptions import (
    InvalidArgumentsError,
    InvalidArgumentSyntaxError,
    InvalidArgumentTypeError,
)
from mediatypes.models.media_type import MediaType


def require_extension(value: Any, *, argument: str = "extension") -> str:
    """Return *value* lowercased, or raise if it is not a valid extension."""
    if not isinstance(value, str):
        raise InvalidArgumentTypeError(
            f"Invalid {argument}: expected str, got {type(value).__name__}",
            argument=argument,
        )
    if not is_valid_extension(value):
        raise InvalidArgumentSyntaxError(f"Invalid {argument}: {value!r}", argument=argument, value=value)
    return value.lower()


def require_media_type(value: Any, *, argument: str = "media_type") -> MediaType:
    """Parse *value*, or raise if it is not a valid media type."""
    if isinstance(value, MediaType):
        return value
    if not isinstance(value, str):
        raise InvalidArgumentTypeError(
            f"Invalid {argument}: expected str, got {type(value).__name__}",
            argument=argument,
        )
    try:
        return MediaType.parse(value)
    except ValueError:
        raise InvalidArgumentSyntaxError(f"Invalid {argument}: {value!r}", argument=argument, value=value) from None


def require_pair(extension: Any, media_type: Any) -> tuple[str, MediaType]:
    """Validate both arguments of a dual-argument call.

    A single violation is raised as is; two violations are raised together
    as :class:`InvalidArgumentsError`.
    """
    errors: list[Exception] = []
    ext: str | None = None
    parsed: MediaType | None = None
    try:
        ext = require_extension(extension)
    except (InvalidArgumentTypeError, InvalidArgumentSyntaxError) as exc:
        errors.append(exc)
    try:
        parsed = require_media_type(media_type)
    except (InvalidArgumentTypeError, InvalidArgumentSyntaxError) as exc:
        errors.append(exc)

    if len(errors) > 1:
        raise InvalidArgumentsError("Invalid arguments", errors)
    if errors:
        raise errors[0]
    assert ext is not None and parsed is not None  # noqa: S101
    return ext, parsed
