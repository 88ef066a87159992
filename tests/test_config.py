from __future__ import annotations

from pathlib import Path

import pytest

from mediatypes.config import MediaTypesConfig
from mediatypes.exceptions import MediaTypesConfigError
from mediatypes.ingestion.sources import Source


def test_defaults() -> None:
    config = MediaTypesConfig()

    assert config.update_interval == 86400.0
    assert config.snapshot_name == "snapshot.json"
    assert [spec.source for spec in config.sources()] == [Source.APACHE, Source.DEBIAN, Source.NGINX]
    assert config.sources()[2].url.endswith("/conf/mime.types")


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MEDIATYPES_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("MEDIATYPES_UPDATE_INTERVAL", "-1")
    monkeypatch.setenv("MEDIATYPES_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("MEDIATYPES_NGINX_URL", "http://mirror.invalid/mime.types")

    config = MediaTypesConfig.from_env()

    assert config.data_path == tmp_path
    assert config.update_interval == -1.0
    assert config.request_timeout == 2.5
    assert config.sources()[2].url == "http://mirror.invalid/mime.types"


def test_from_env_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDIATYPES_UPDATE_INTERVAL", "not a number")
    monkeypatch.setenv("MEDIATYPES_SNAPSHOT_NAME", "env.json")

    config = MediaTypesConfig.from_env(update_interval=60.0, snapshot_name="explicit.json")

    assert config.update_interval == 60.0
    assert config.snapshot_name == "explicit.json"


def test_from_env_rejects_bad_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MEDIATYPES_REQUEST_TIMEOUT", "thirty")

    with pytest.raises(MediaTypesConfigError):
        MediaTypesConfig.from_env()


def test_data_path_expands_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))

    assert MediaTypesConfig(data_dir="~/registry").data_path == tmp_path / "registry"
