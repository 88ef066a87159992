"""Upstream registries the store is synchronized from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Source(StrEnum):
    APACHE = "apache"
    DEBIAN = "debian"
    NGINX = "nginx"


@dataclass(frozen=True)
class SourceSpec:
    """Where to fetch one upstream registry from."""

    source: Source
    url: str
