"""Connection settings for the prompt hub."""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import HubError

logger = logging.getLogger(__name__)


class HubSettings(BaseSettings):
    """Where the hub lives and how to authenticate against it.

    Values come from the environment. Unset values stay None so the registry
    client can apply its own defaults.
    """

    model_config = SettingsConfigDict(extra="ignore")

    api_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LANGSMITH_ENDPOINT", "LANGCHAIN_ENDPOINT"),
    )
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("LANGSMITH_API_KEY", "LANGCHAIN_API_KEY"),
    )

    def merged(self, api_url: Optional[str] = None, api_key: Optional[str] = None) -> "HubSettings":
        """Return a copy with any explicitly given values taking precedence."""
        return self.model_copy(
            update={"api_url": api_url or self.api_url, "api_key": api_key or self.api_key}
        )

    def with_defaults(self, api_url: Optional[str] = None, api_key: Optional[str] = None) -> "HubSettings":
        """Return a copy with the given values filling only unset settings."""
        return self.model_copy(
            update={"api_url": self.api_url or api_url, "api_key": self.api_key or api_key}
        )


def _read_config_file(path: Path) -> dict:
    """Read the optional YAML config file."""
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise HubError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise HubError(f"Error parsing YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise HubError(f"Config file {path} must contain a mapping")

    logger.debug("Loaded hub settings from %s", path)
    return data


def load_settings(config_path: str | Path | None = None) -> HubSettings:
    """
    Load hub settings.

    Environment variables win over values from the YAML config file.

    Args:
        config_path: Optional YAML file with ``api_url`` and ``api_key`` keys.

    Returns:
        The resolved settings.
    """
    settings = HubSettings()

    if config_path is not None:
        data = _read_config_file(Path(config_path))
        settings = settings.with_defaults(api_url=data.get("api_url"), api_key=data.get("api_key"))

    return settings
