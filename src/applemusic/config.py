"""Configuration management for the Apple Music catalog client."""

from __future__ import annotations

import configparser
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


class ClientConfiguration(BaseModel):
    """Credentials and defaults shared by every resource client.

    Immutable once constructed; safe to share between clients and threads.
    """

    model_config = ConfigDict(frozen=True)

    developer_token: str
    default_storefront: str | None = None  # e.g. "us", "jp"
    default_language_tag: str | None = None  # e.g. "en-US"


class AppleMusicConfig(BaseModel):
    """Apple Music API configuration."""

    developer_token: str | None = None
    storefront: str | None = None
    language_tag: str | None = None


class OptionsConfig(BaseModel):
    """General options configuration."""

    timeout: float = 30.0
    search_limit: int = 10


class AppConfig(BaseModel):
    """Application configuration."""

    apple_music: AppleMusicConfig = Field(default_factory=AppleMusicConfig)
    options: OptionsConfig = Field(default_factory=OptionsConfig)


# Global config instance
_config: AppConfig | None = None
_config_path: Path | None = None  # Track where config was loaded from


def get_config_paths() -> list[Path]:
    """Get list of config file paths to search, in priority order.

    Search order:
    1. Current working directory (INI)
    2. User home directory (~/.applemusic/)
    3. YAML files in the same locations

    Returns:
        List of paths to check for config files.
    """
    cwd = Path.cwd()
    home_dir = Path.home() / ".applemusic"

    return [
        cwd / "applemusic.ini",
        home_dir / "applemusic.ini",
        cwd / "applemusic.yaml",
        cwd / "applemusic.yml",
        home_dir / "config.yaml",
        home_dir / "config.yml",
    ]


def find_config_file() -> Path | None:
    """Find the first existing config file.

    Returns:
        Path to config file if found, None otherwise.
    """
    for path in get_config_paths():
        if path.exists():
            return path
    return None


def _expand_env_vars(value: Any) -> Any:
    """Recursively expand environment variables in config values.

    Supports ${VAR} and $VAR syntax. Unset variables expand to "".
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, "")

        return pattern.sub(replace, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    return value


def _drop_empty(section: dict[str, Any]) -> dict[str, Any]:
    # Empty strings (e.g. an unset ${VAR}) mean "not configured"
    return {k: v for k, v in section.items() if v is not None and v != ""}


def _load_ini_config(path: Path) -> dict[str, Any]:
    """Load configuration from INI file.

    Args:
        path: Path to INI config file.

    Returns:
        Dictionary structure matching AppConfig schema.
    """
    parser = configparser.ConfigParser()
    parser.read(path, encoding="utf-8")

    config: dict[str, Any] = {}

    if parser.has_section("apple_music"):
        config["apple_music"] = {
            "developer_token": parser.get("apple_music", "developer_token", fallback=None),
            "storefront": parser.get("apple_music", "storefront", fallback=None),
            "language_tag": parser.get("apple_music", "language_tag", fallback=None),
        }

    if parser.has_section("options"):
        options: dict[str, Any] = {}
        if parser.has_option("options", "timeout"):
            try:
                options["timeout"] = parser.getfloat("options", "timeout")
            except ValueError:
                pass  # Keep default
        if parser.has_option("options", "search_limit"):
            try:
                options["search_limit"] = parser.getint("options", "search_limit")
            except ValueError:
                pass  # Keep default
        if options:
            config["options"] = options

    return config


def _load_yaml_config(path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from file.

    Supports both INI (.ini/.cfg) and YAML (.yaml/.yml) formats.
    Environment variables are expanded in all values using ${VAR} syntax.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration with environment variables expanded.
    """
    global _config, _config_path

    if path is None:
        path = find_config_file()

    if path is None or not path.exists():
        # No config file, return defaults
        _config = AppConfig()
        _config_path = None
        return _config

    if path.suffix in (".ini", ".cfg"):
        raw_config = _load_ini_config(path)
    else:
        raw_config = _load_yaml_config(path)

    expanded_config = _expand_env_vars(raw_config)
    if isinstance(expanded_config.get("apple_music"), dict):
        expanded_config["apple_music"] = _drop_empty(expanded_config["apple_music"])

    _config = AppConfig.model_validate(expanded_config)
    _config_path = path
    return _config


def get_config_path() -> Path | None:
    """Get the path to the currently loaded config file, or None for defaults."""
    return _config_path


def get_config() -> AppConfig:
    """Get the current configuration, loading it from disk on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the cached configuration.

    Useful for testing or when config file changes.
    """
    global _config, _config_path
    _config = None
    _config_path = None


def client_configuration_from_config(
    cfg: AppConfig | None = None,
    *,
    developer_token: str | None = None,
    storefront: str | None = None,
    language_tag: str | None = None,
) -> ClientConfiguration:
    """Build a ClientConfiguration from the application config.

    Args:
        cfg: Application config. Defaults to the globally loaded one.
        developer_token: Overrides the configured token (e.g. from --token).
        storefront: Overrides the configured default storefront.
        language_tag: Overrides the configured default language tag.

    Raises:
        ConfigurationError: If no developer token is configured.
    """
    from applemusic.api.base import ConfigurationError

    if cfg is None:
        cfg = get_config()

    token = developer_token or cfg.apple_music.developer_token
    if not token:
        raise ConfigurationError(
            "Apple Music developer token not provided. "
            "Configure developer_token in applemusic.ini."
        )

    return ClientConfiguration(
        developer_token=token,
        default_storefront=storefront or cfg.apple_music.storefront,
        default_language_tag=language_tag or cfg.apple_music.language_tag,
    )


def get_config_dir() -> Path:
    """Get the user config directory, creating it if needed."""
    config_dir = Path.home() / ".applemusic"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def save_default_config(
    path: Path | None = None,
    developer_token: str = "",
    storefront: str = "",
    language_tag: str = "",
) -> Path:
    """Save a default INI config file.

    Args:
        path: Where to save. Defaults to ./applemusic.ini.
        developer_token: Developer token (falls back to ${APPLE_MUSIC_TOKEN}).
        storefront: Default storefront (falls back to ${APPLE_MUSIC_STOREFRONT}).
        language_tag: Default language (falls back to ${APPLE_MUSIC_LANGUAGE}).

    Returns:
        Path to saved config file.
    """
    if path is None:
        path = Path.cwd() / "applemusic.ini"

    token_value = developer_token or "${APPLE_MUSIC_TOKEN}"
    storefront_value = storefront or "${APPLE_MUSIC_STOREFRONT}"
    language_value = language_tag or "${APPLE_MUSIC_LANGUAGE}"

    default_config = f"""\
# Apple Music catalog client configuration
# You can use environment variables with ${{VAR}} syntax

[apple_music]
# Developer token (JWT) from your Apple Developer account
developer_token = {token_value}
# Default storefront, e.g. us, gb, jp
storefront = {storefront_value}
# Default language tag, e.g. en-US (optional)
language_tag = {language_value}

[options]
# Request timeout in seconds
timeout = 30
# Default number of search results per type
search_limit = 10
"""

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        f.write(default_config)

    return path
