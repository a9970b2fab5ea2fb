"""Configuration settings for the FetchSERP client."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .errors import AuthenticationError, ConfigurationError

load_dotenv()

DEFAULT_BASE_URL = "https://www.fetchserp.com"
DEFAULT_TIMEOUT_MS = 30000  # 30s

# Environment variables (always win over the config file)
ENV_API_KEY = "FETCHSERP_API_KEY"
ENV_BASE_URL = "FETCHSERP_BASE_URL"
ENV_TIMEOUT = "FETCHSERP_TIMEOUT"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings for one client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT_MS  # ms

    def __post_init__(self):
        if not self.api_key:
            raise AuthenticationError(
                "FetchSERP API key not configured. "
                f"Set {ENV_API_KEY} environment variable or pass api_key parameter."
            )
        if not self.base_url:
            raise ConfigurationError("base_url must be a non-empty string")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, int) or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be a positive number of milliseconds, got {self.timeout!r}")

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    @property
    def masked_key(self) -> str:
        return mask_key(self.api_key)


def parse_timeout(value, source: str) -> int:
    """Coerce a millisecond timeout from YAML or the environment."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{source} must be an integer number of milliseconds, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        raise ConfigurationError(
            f"{source} must be an integer number of milliseconds, got {value!r}"
        ) from None


def mask_key(api_key: str) -> str:
    """Hide all but the last four characters of a key."""
    if not api_key:
        return ""
    if len(api_key) <= 4:
        return "*" * len(api_key)
    return "*" * (len(api_key) - 4) + api_key[-4:]


@dataclass
class Settings:
    """Unified settings with YAML override support."""

    api_key: str = field(default_factory=lambda: os.environ.get(ENV_API_KEY, ""))
    base_url: str = DEFAULT_BASE_URL
    timeout: int = DEFAULT_TIMEOUT_MS

    def to_client_config(self) -> ClientConfig:
        """Freeze these settings into a ClientConfig."""
        return ClientConfig(
            api_key=self.api_key,
            base_url=self.base_url or DEFAULT_BASE_URL,
            timeout=DEFAULT_TIMEOUT_MS if self.timeout is None else parse_timeout(self.timeout, "timeout"),
        )


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file with environment overrides.

    Priority: environment > config file > defaults

    Args:
        path: Path to YAML config file (optional)

    Returns:
        Settings instance with merged configuration
    """
    settings = Settings()

    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            for key, value in data.items():
                if hasattr(settings, key):
                    setattr(settings, key, value)

            if data.get("timeout") is not None:
                settings.timeout = parse_timeout(data["timeout"], f"timeout in {path}")

    if os.environ.get(ENV_API_KEY):
        settings.api_key = os.environ[ENV_API_KEY]
    if os.environ.get(ENV_BASE_URL):
        settings.base_url = os.environ[ENV_BASE_URL]
    if os.environ.get(ENV_TIMEOUT):
        settings.timeout = parse_timeout(os.environ[ENV_TIMEOUT], ENV_TIMEOUT)

    return settings
