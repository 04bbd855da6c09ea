"""Client settings for the Zotero Web API client.

Settings default to the fixed protocol constants. A YAML file can override them
for a deployment that proxies the API or keeps profiles somewhere else.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from omegaconf import OmegaConf
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    APP_NAMESPACE,
    DEFAULT_TIMEOUT_SECONDS,
    USER_AGENT,
    ZOTERO_API_BASE_URL,
    ZOTERO_API_VERSION,
)


def _default_storage_dir() -> Path:
    return Path.home() / APP_NAMESPACE


def _load_normalized_settings(location: Path) -> dict[str, Any]:
    raw_config = OmegaConf.load(location)
    config = OmegaConf.to_container(raw_config, resolve=True)
    if not isinstance(config, dict):
        raise ValueError("Settings file must contain a mapping of setting keys.")
    return {str(key).lower(): value for key, value in config.items()}


class ClientSettings(BaseModel):
    """Validated settings shared by the credential store and the request builder.

    Attributes:
        base_url: Root of the Zotero Web API
        api_version: Value sent in the ``Zotero-API-Version`` header
        timeout: Default per-request timeout in seconds
        user_agent: Value sent in the ``User-Agent`` header
        storage_dir: Directory holding one JSON file per credential profile
        record_history: Whether sessions keep a request log by default
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = Field(default=ZOTERO_API_BASE_URL, examples=["https://api.zotero.org"])
    api_version: str = Field(default=ZOTERO_API_VERSION)
    timeout: int = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    user_agent: str = Field(default=USER_AGENT)
    storage_dir: Path = Field(default_factory=_default_storage_dir)
    record_history: bool = True

    @field_validator("storage_dir")
    @classmethod
    def _expand_storage_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @classmethod
    def from_file(cls, path: Path | str) -> ClientSettings:
        """Create settings from a YAML file; unknown keys are rejected."""
        location = Path(path).expanduser()
        if not location.exists():
            raise FileNotFoundError(f"Settings file not found: {location}")

        normalized = _load_normalized_settings(location)
        unknown = sorted(set(normalized) - set(cls.model_fields))
        if unknown:
            joined = ", ".join(unknown)
            raise ValueError(f"Unknown client settings: {joined}")
        return cls(**normalized)
