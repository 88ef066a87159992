"""Token grammar for file extensions and media types.

Media types follow RFC 6838 §4.2 (restricted names, facets such as ``vnd.``
and structured syntax suffixes such as ``+xml``) with optional RFC 2045
parameters. Everything here is a pure function over strings.
"""

from __future__ import annotations

import re
from typing import Any

_RESTRICTED_FIRST = r"[a-z0-9]"
_TYPE_NAME = rf"{_RESTRICTED_FIRST}[a-z0-9!#$&^_-]{{0,126}}"
_SUBTYPE_NAME = rf"{_RESTRICTED_FIRST}[a-z0-9!#$&^_.+-]{{0,126}}"
# RFC 2045 token: any visible ASCII except tspecials.
_PARAM_TOKEN = r"[a-z0-9!#$%&'*+.^_`|~-]+"
_PARAM_QUOTED = r'"(?:[^"\\\r\n]|\\.)*"'
_PARAMETER = rf"\s*;\s*({_PARAM_TOKEN})=({_PARAM_TOKEN}|{_PARAM_QUOTED})"

MEDIA_TYPE_PATTERN: re.Pattern[str] = re.compile(
    rf"(?P<type>{_TYPE_NAME})/(?P<subtype>{_SUBTYPE_NAME})(?P<parameters>(?:{_PARAMETER})*)",
    re.IGNORECASE | re.ASCII,
)
EXTENSION_PATTERN: re.Pattern[str] = re.compile(r"[a-z0-9!#$&^_+-]+", re.IGNORECASE | re.ASCII)

_PARAMETER_PATTERN = re.compile(_PARAMETER, re.IGNORECASE | re.ASCII)


def is_valid_extension(token: Any) -> bool:
    """Return ``True`` for a bare extension token such as ``jpg`` or ``tar-gz``."""
    return isinstance(token, str) and EXTENSION_PATTERN.fullmatch(token) is not None


def match_media_type(token: Any) -> re.Match[str] | None:
    """Match *token* against the full media type grammar."""
    if not isinstance(token, str):
        return None
    return MEDIA_TYPE_PATTERN.fullmatch(token)


def is_valid_media_type(token: Any) -> bool:
    """Return ``True`` for ``type/subtype`` with optional ``;name=value`` parameters."""
    return match_media_type(token) is not None


def split_parameters(text: str) -> list[tuple[str, str]]:
    """Split the parameter tail of a matched media type into name/value pairs."""
    return _PARAMETER_PATTERN.findall(text)
