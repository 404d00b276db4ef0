"""Provider configuration.

Configuration loading priority:
1. Environment variables (highest)
2. Config file (~/.repoflow/config.toml)

Environment variables:
    - REPOFLOW_BASE_URL: Base URL of the repoflow server (required)
    - REPOFLOW_API_KEY: API key (required)
    - REPOFLOW_TIMEOUT: Request timeout in seconds (optional, default 30)

Config file:
    [repoflow]
    base_url = "https://repoflow.example.com"
    api_key = "..."
    timeout = 30
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".repoflow"
DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_TIMEOUT = 30


@dataclass
class ProviderConfig:
    """Connection settings for the repoflow API.

    Attributes:
        base_url: Base URL of the repoflow server.
        api_key: API key sent as a bearer token.
        timeout: Request timeout in seconds.
    """

    base_url: str
    api_key: str
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls) -> ProviderConfig | None:
        """Create config from environment variables.

        Returns:
            ProviderConfig or None if required vars not set.
        """
        base_url = os.environ.get("REPOFLOW_BASE_URL", "")
        api_key = os.environ.get("REPOFLOW_API_KEY", "")

        if not base_url or not api_key:
            return None

        return cls(
            base_url=base_url,
            api_key=api_key,
            timeout=_parse_timeout(os.environ.get("REPOFLOW_TIMEOUT", str(DEFAULT_TIMEOUT))),
        )

    @classmethod
    def from_config_file(cls, path: Path | None = None) -> ProviderConfig | None:
        """Load config from TOML file.

        Args:
            path: Path to config file (default: ~/.repoflow/config.toml).

        Returns:
            ProviderConfig or None if not configured.

        Raises:
            ConfigError: If the file exists but cannot be parsed.
        """
        if path is None:
            path = DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE

        if not path.exists():
            return None

        try:
            import tomllib
        except ImportError:
            import tomli as tomllib  # type: ignore

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Failed to parse {path}: {e}") from e

        section = data.get("repoflow", {})
        if not section.get("base_url") or not section.get("api_key"):
            logger.debug(f"No [repoflow] credentials in {path}")
            return None

        return cls(
            base_url=section["base_url"],
            api_key=section["api_key"],
            timeout=_parse_timeout(section.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def load(cls, path: Path | None = None) -> ProviderConfig | None:
        """Load config from environment or config file.

        Prefers environment variables over config file.
        """
        config = cls.from_env()
        if config:
            logger.debug("Loaded repoflow config from environment")
            return config

        return cls.from_config_file(path)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for display. The API key is left out."""
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
        }


def _parse_timeout(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"timeout must be an integer, got {value!r}") from e
