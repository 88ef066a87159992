"""Persisted registry snapshot."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RegistrySnapshot(BaseModel):
    """Serialized form of the registry and the per-source version tokens.

    Media types are stored in their normalized text form; the store
    re-validates every entry on load.
    """

    model_config = ConfigDict(extra="ignore")

    registry: dict[str, list[str]] = Field(default_factory=dict)
    versions: dict[str, str] = Field(default_factory=dict)

    @field_validator("versions", mode="before")
    @classmethod
    def _blank_missing_versions(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {key: "" if token is None else token for key, token in value.items()}
        return value
