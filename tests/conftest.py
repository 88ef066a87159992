from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from mediatypes._storage import MemoryBlobStorage
from mediatypes._transport import HttpResponse
from mediatypes.config import MediaTypesConfig
from mediatypes.ingestion.sources import Source

APACHE_BODY = """\
# This file maps Internet media types to unique file extension(s).
# MIME type (lowercased)\t\t\tExtensions
# ============================================\t==========
audio/mpeg\t\t\t\t\tmpga mp2 mp2a mp3 m2a m3a
image/jpeg\t\t\t\t\tjpeg jpg jpe
text/plain\t\t\t\t\ttxt text conf def list log in
video/mp4\t\t\t\t\tmp4 mp4v mpg4
"""

DEBIAN_BODY = """\
###############################################################################
#
#  MIME media types and the extensions that represent them.
#
###############################################################################

audio/mpeg\t\t\t\t\tmpga mpega mp1 mp2 mp3
image/jpeg\t\t\t\t\tjpeg jpg jpe jfif
text/plain\t\t\t\t\ttxt text pot brf srt
video/mp4\t\t\t\t\tmp4 mpg4 m4v
"""

NGINX_BODY = """
types {
    audio/mpeg                                       mp3;
    image/jpeg                                       jpeg jpg;
    text/plain                                       txt;
    video/mp4                                        mp4;
}
"""


@dataclass
class FakeUpstream:
    """Serves one document per source URL and records every request."""

    config: MediaTypesConfig
    documents: dict[Source, tuple[str, str]] = field(default_factory=dict)
    status: dict[Source, int] = field(default_factory=dict)
    failures: dict[Source, BaseException] = field(default_factory=dict)
    calls: list[tuple[str, Source]] = field(default_factory=list)

    def _source(self, url: str) -> Source:
        for spec in self.config.sources():
            if spec.url == url:
                return spec.source
        raise AssertionError(f"Unexpected url: {url}")

    def count(self, method: str, source: Source | None = None) -> int:
        return sum(1 for m, s in self.calls if m == method and (source is None or s == source))

    async def request(self, method: str, url: str) -> HttpResponse:
        source = self._source(url)
        self.calls.append((method, source))
        if source in self.failures:
            raise self.failures[source]
        etag, body = self.documents[source]
        headers = {"ETag": etag} if etag else {}
        return HttpResponse(
            status=self.status.get(source, 200),
            headers=headers,
            body="" if method == "HEAD" else body,
        )


@pytest.fixture
def config() -> MediaTypesConfig:
    return MediaTypesConfig(update_interval=-1)


@pytest.fixture
def storage() -> MemoryBlobStorage:
    return MemoryBlobStorage()


@pytest.fixture
def upstream(config: MediaTypesConfig) -> FakeUpstream:
    return FakeUpstream(
        config=config,
        documents={
            Source.APACHE: ('"apache-v1"', APACHE_BODY),
            Source.DEBIAN: ('"debian-v1"', DEBIAN_BODY),
            Source.NGINX: ('"nginx-v1"', NGINX_BODY),
        },
    )


@pytest.fixture
def apache_body() -> str:
    return APACHE_BODY


@pytest.fixture
def nginx_body() -> str:
    return NGINX_BODY
