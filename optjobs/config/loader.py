"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "OPTJOBS_CONFIG_DIR"
ENVIRONMENT_ENV = "OPTJOBS_ENV"


def get_config_dir() -> Path | None:
    """Locate the configuration directory.

    OPTJOBS_CONFIG_DIR wins when set and must exist. Otherwise the nearest
    `config/` directory holding a `default.toml` is used, searching the
    current directory and up to four parents. Returns None when the
    library runs without any config files.
    """
    config_dir_env = os.environ.get(CONFIG_DIR_ENV)
    if config_dir_env:
        path = Path(config_dir_env)
        if not path.is_dir():
            raise FileNotFoundError(f"Config directory not found: {config_dir_env}")
        return path

    current = Path.cwd()
    for _ in range(5):
        candidate = current / "config"
        if (candidate / "default.toml").exists():
            return candidate
        current = current.parent

    return None


def get_environment() -> str:
    """Get the current environment from OPTJOBS_ENV.

    Defaults to 'development' if not set.
    """
    return os.environ.get(ENVIRONMENT_ENV, "development")


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    Nested tables are merged key by key; any other value in override
    replaces the one in base. Neither input is modified.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config(config_dir: Path | None = None, env: str | None = None) -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. {config_dir}/default.toml
    2. {config_dir}/{env}.toml (optional)

    Args:
        config_dir: Directory to read; discovered with get_config_dir() when omitted
        env: Environment name; read from OPTJOBS_ENV when omitted

    Returns:
        Merged configuration dictionary, empty when no config directory exists
    """
    config_dir = config_dir or get_config_dir()
    if config_dir is None:
        return {}

    env = env or get_environment()

    default_path = config_dir / "default.toml"
    config = load_toml(default_path) if default_path.exists() else {}

    env_path = config_dir / f"{env}.toml"
    if env_path.exists():
        config = deep_merge(config, load_toml(env_path))

    return config
