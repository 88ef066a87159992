"""Parsed media type value object."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from mediatypes._grammar import match_media_type, split_parameters

_FACETS: tuple[tuple[str, str], ...] = (
    ("vnd.", "vnd"),
    ("prs.", "prs"),
    ("x.", "x"),
    ("x-", "x"),
)


class MediaType(BaseModel):
    """A validated ``type/subtype[;name=value...]`` media type.

    Type, subtype and parameter names are lowercased; parameter values are
    kept verbatim. Two media types describe the same format when their
    :attr:`essence` is equal, which is how the registry deduplicates.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    subtype: str
    parameters: tuple[tuple[str, str], ...] = ()

    @classmethod
    def parse(cls, value: str) -> MediaType:
        """Parse and normalize *value*.

        Raises :class:`ValueError` when *value* does not follow the media
        type grammar.
        """
        match = match_media_type(value)
        if match is None:
            raise ValueError(f"Invalid media type: {value!r}")
        parameters = tuple((name.lower(), val) for name, val in split_parameters(match.group("parameters")))
        return cls(
            type=match.group("type").lower(),
            subtype=match.group("subtype").lower(),
            parameters=parameters,
        )

    @property
    def essence(self) -> str:
        """``type/subtype`` without parameters."""
        return f"{self.type}/{self.subtype}"

    @property
    def suffix(self) -> str | None:
        """Structured syntax suffix (``xml`` for ``image/svg+xml``)."""
        if "+" not in self.subtype:
            return None
        return self.subtype.rpartition("+")[2] or None

    @property
    def facet(self) -> str | None:
        """Registration tree facet (``vnd``, ``prs`` or ``x``), if any."""
        for prefix, name in _FACETS:
            if self.subtype.startswith(prefix):
                return name
        return None

    def __str__(self) -> str:
        return self.essence + "".join(f";{name}={value}" for name, value in self.parameters)
