"""Configuration loading and management."""

from expose.config.loader import Settings, get_settings, load_provider_config

__all__ = ["Settings", "get_settings", "load_provider_config"]
