"""Parsers for the upstream ``mime.types`` formats.

Apache httpd and Debian publish the same whitespace table::

    # comment
    image/jpeg                  jpeg jpg jpe

NGINX wraps the same shape in a ``types { ... }`` block with ``;``
terminated statements. Both parsers drop malformed lines and tokens instead
of failing the whole document.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable

from mediatypes._grammar import is_valid_extension
from mediatypes.exceptions import MediaTypesParseError
from mediatypes.ingestion.sources import Source
from mediatypes.models.fragment import ParsedFragment
from mediatypes.models.media_type import MediaType

_logger = logging.getLogger(__name__)

Parser = Callable[[str, str], ParsedFragment]

_COMMENT_RE = re.compile(r"^\s*#[^\n]*", re.MULTILINE)
_NGINX_BLOCK_RE = re.compile(r"\btypes\s*\{|\}", re.IGNORECASE)


def _add(content: dict[str, list[MediaType]], extension: str, media_type: MediaType) -> None:
    bucket = content.setdefault(extension, [])
    if all(existing.essence != media_type.essence for existing in bucket):
        bucket.append(media_type)


def _parse_statements(statements: Iterable[str]) -> dict[str, list[MediaType]]:
    content: dict[str, list[MediaType]] = {}
    for statement in statements:
        tokens = statement.split()
        if not tokens:
            continue
        try:
            media_type = MediaType.parse(tokens[0])
        except ValueError:
            _logger.debug("Skipping line with invalid media type: %r", statement[:120])
            continue
        for candidate in tokens[1:]:
            extension = candidate.lower()
            if not is_valid_extension(extension):
                _logger.debug("Skipping invalid extension %r for %s", candidate, media_type)
                continue
            _add(content, extension, media_type)
    return content


def _fragment(content: dict[str, list[MediaType]], version: str) -> ParsedFragment:
    if not content:
        raise MediaTypesParseError("Document contains no valid extension/media type association")
    return ParsedFragment(version=version, content=content)


def parse_whitespace_table(body: str, version: str) -> ParsedFragment:
    """Parse the Apache/Debian ``media-type ext1 ext2 ...`` table."""
    lines = (line.strip() for line in body.splitlines())
    statements = (line for line in lines if line and not line.startswith("#"))
    return _fragment(_parse_statements(statements), version)


def parse_nginx_types(body: str, version: str) -> ParsedFragment:
    """Parse an NGINX ``types { media/type ext ...; }`` block."""
    stripped = _NGINX_BLOCK_RE.sub(" ", _COMMENT_RE.sub("", body))
    return _fragment(_parse_statements(stripped.split(";")), version)


PARSERS: dict[Source, Parser] = {
    Source.APACHE: parse_whitespace_table,
    Source.DEBIAN: parse_whitespace_table,
    Source.NGINX: parse_nginx_types,
}
