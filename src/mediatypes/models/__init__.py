"""Data models for mediatypes."""

from mediatypes.models.fragment import ParsedFragment
from mediatypes.models.media_type import MediaType
from mediatypes.models.snapshot import RegistrySnapshot

__all__ = [
    "MediaType",
    "ParsedFragment",
    "RegistrySnapshot",
]
