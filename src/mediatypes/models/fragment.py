"""Transient parse result for one upstream document."""

from __future__ import annotations

from dataclasses import dataclass, field

from mediatypes.models.media_type import MediaType


@dataclass(frozen=True)
class ParsedFragment:
    """Associations read from a single fetch of one source.

    ``version`` is the cache validator the document was served with.
    Fragments are merged into the store and then dropped.
    """

    version: str
    content: dict[str, list[MediaType]] = field(default_factory=dict)

    @property
    def is_useful(self) -> bool:
        return bool(self.version) and bool(self.content)
