from __future__ import annotations

import pytest

from mediatypes._grammar import is_valid_extension, is_valid_media_type
from mediatypes.models.media_type import MediaType


@pytest.mark.parametrize("token", ["jpg", "JPG", "tar-gz", "c++", "7z", "a_b", "x!#$&^"])
def test_valid_extensions(token: str) -> None:
    assert is_valid_extension(token)


@pytest.mark.parametrize("token", ["", ".txt", "tar.gz", "a/b", "a b", "%@?", "é", None, 1, ["jpg"]])
def test_invalid_extensions(token: object) -> None:
    assert not is_valid_extension(token)


@pytest.mark.parametrize(
    "token",
    [
        "text/plain",
        "TEXT/HTML",
        "application/vnd.ms-excel",
        "application/x-test",
        "x-conference/x-cooltalk",
        "image/svg+xml",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain;charset=utf-8",
        "text/plain; charset=utf-8; format=flowed",
        'multipart/form-data; boundary="a b;c"',
    ],
)
def test_valid_media_types(token: str) -> None:
    assert is_valid_media_type(token)


@pytest.mark.parametrize(
    "token",
    [
        "",
        "application",
        "application/",
        "/x-test",
        "video/%@?",
        "text/plain;",
        "text/plain;charset",
        "text /plain",
        "text/plain extra",
        "-text/plain",
        None,
        42,
    ],
)
def test_invalid_media_types(token: object) -> None:
    assert not is_valid_media_type(token)


def test_media_type_parse_normalizes_names_but_keeps_values() -> None:
    media_type = MediaType.parse("Text/HTML; Charset=UTF-8")

    assert media_type.type == "text"
    assert media_type.subtype == "html"
    assert media_type.parameters == (("charset", "UTF-8"),)
    assert media_type.essence == "text/html"
    assert str(media_type) == "text/html;charset=UTF-8"


def test_media_type_facet_and_suffix() -> None:
    assert MediaType.parse("image/svg+xml").suffix == "xml"
    assert MediaType.parse("application/vnd.api+json").facet == "vnd"
    assert MediaType.parse("application/x-tar").facet == "x"
    assert MediaType.parse("text/plain").facet is None
    assert MediaType.parse("text/plain").suffix is None


def test_media_type_parse_rejects_malformed_input() -> None:
    with pytest.raises(ValueError):
        MediaType.parse("application/")


def test_media_type_is_hashable_and_comparable() -> None:
    assert MediaType.parse("text/plain") == MediaType.parse("TEXT/plain")
    assert len({MediaType.parse("text/plain"), MediaType.parse("text/plain")}) == 1
    assert MediaType.parse("text/plain;a=1") != MediaType.parse("text/plain")
