"""Configuration loading from environment and YAML files."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PROVIDER_CONFIG: dict[str, Any] = {"enabled_providers": ["echo"]}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Bearer token the relay sends to the remote endpoint
    expose_key: str = ""

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # Timeouts (seconds)
    default_timeout: int = 30

    # Server info
    server_name: str = "expose"
    server_version: str = "0.0.1"

    # Host and port
    host: str = "0.0.0.0"
    port: int = 3000

    # Provider config file
    providers_config: str = ""

    # Sales CRM provider (Airtable)
    crm_api_key: str = ""
    crm_base_id: str = ""
    crm_table: str = "Default"
    crm_view: str = "Grid view"
    crm_api_url: str = "https://api.airtable.com/v0"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def relay_auth_enabled(self) -> bool:
        """Check if the relay should authenticate outbound calls."""
        return bool(self.expose_key)

    @property
    def crm_enabled(self) -> bool:
        """Check if the CRM provider has credentials."""
        return bool(self.crm_api_key and self.crm_base_id)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_provider_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load provider configuration from a YAML file.

    Args:
        config_path: Path to the config file. If None, uses PROVIDERS_CONFIG
            or the default location.

    Returns:
        Dictionary with configuration data.
    """
    if config_path is None:
        configured = get_settings().providers_config
        possible_paths = [Path(configured)] if configured else []
        possible_paths += [
            Path("config/providers.yaml"),
            Path(__file__).parent.parent.parent / "config" / "providers.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = path
                break
        else:
            return dict(DEFAULT_PROVIDER_CONFIG)

    config_path = Path(config_path)
    if not config_path.exists():
        return dict(DEFAULT_PROVIDER_CONFIG)

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    return config


def get_enabled_providers(config: dict[str, Any] | None = None) -> list[str]:
    """Get list of enabled provider names."""
    if config is None:
        config = load_provider_config()
    return list(config.get("enabled_providers", DEFAULT_PROVIDER_CONFIG["enabled_providers"]))
