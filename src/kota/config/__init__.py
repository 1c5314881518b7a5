"""Config script loading and settings schema."""

from kota.config.loader import DEFAULT_CONFIG_PATH, ConfigLoader, load_config
from kota.config.schema import DEFAULT_API_BASE, DEFAULT_MODEL, Settings

__all__ = [
    "DEFAULT_API_BASE",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_MODEL",
    "ConfigLoader",
    "Settings",
    "load_config",
]
