"""Library configuration for mediatypes."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from mediatypes._constants import (
    APACHE_URL,
    DEBIAN_URL,
    DEFAULT_DATA_DIR,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SNAPSHOT_NAME,
    DEFAULT_UPDATE_INTERVAL,
    NGINX_URL,
    USER_AGENT,
)
from mediatypes.exceptions import MediaTypesConfigError
from mediatypes.ingestion.sources import Source, SourceSpec


@dataclasses.dataclass(frozen=True)
class MediaTypesConfig:
    """Registry configuration.

    Parameters
    ----------
    update_interval : float
        Seconds between scheduled synchronizations. Any negative value
        disables the scheduler. Defaults to one day.
    data_dir : str
        Directory holding the registry snapshot. ``~`` is expanded.
    snapshot_name : str
        Name of the snapshot blob inside ``data_dir``.
    request_timeout : float
        Total timeout in seconds for a single upstream request.
    apache_url : str
        Location of the Apache httpd ``mime.types`` file.
    debian_url : str
        Location of the Debian ``media-types`` file.
    nginx_url : str
        Location of the NGINX ``mime.types`` block.
    user_agent : str
        ``User-Agent`` header sent upstream.
    """

    update_interval: float = DEFAULT_UPDATE_INTERVAL
    data_dir: str = DEFAULT_DATA_DIR
    snapshot_name: str = DEFAULT_SNAPSHOT_NAME
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    apache_url: str = APACHE_URL
    debian_url: str = DEBIAN_URL
    nginx_url: str = NGINX_URL
    user_agent: str = USER_AGENT

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser()

    def sources(self) -> tuple[SourceSpec, ...]:
        """Upstream sources in merge order."""
        return (
            SourceSpec(Source.APACHE, self.apache_url),
            SourceSpec(Source.DEBIAN, self.debian_url),
            SourceSpec(Source.NGINX, self.nginx_url),
        )

    @classmethod
    def from_env(cls, **overrides: Any) -> MediaTypesConfig:
        """Create configuration from ``MEDIATYPES_*`` environment variables.

        Explicit keyword arguments override environment values.

        Raises
        ------
        MediaTypesConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "MEDIATYPES_DATA_DIR": "data_dir",
            "MEDIATYPES_SNAPSHOT_NAME": "snapshot_name",
            "MEDIATYPES_APACHE_URL": "apache_url",
            "MEDIATYPES_DEBIAN_URL": "debian_url",
            "MEDIATYPES_NGINX_URL": "nginx_url",
            "MEDIATYPES_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric values, handled separately
        _ENV_FLOAT_MAP = {
            "MEDIATYPES_UPDATE_INTERVAL": "update_interval",
            "MEDIATYPES_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise MediaTypesConfigError(f"{env_key} must be a number, got {val!r}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
