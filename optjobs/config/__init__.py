"""Configuration loading for optjobs.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from optjobs.config import get_settings

    settings = get_settings()
    backend = settings.storage.jobs.backend
"""

from functools import lru_cache

from optjobs.config.loader import load_config
from optjobs.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` or `reload_settings()` to reload.
    """
    set_toml_config(load_config())
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
