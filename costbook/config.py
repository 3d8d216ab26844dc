"""Configuration file management for costbook."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

from costbook.domain.currency import CURRENCY_ALIASES
from costbook.domain.errors import ConfigError

DEFAULT_RATES_ENDPOINT = "/rates.json"
DEFAULT_CURRENCY = "USD"


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "costbook" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "rates_url": DEFAULT_RATES_ENDPOINT,
        "default_currency": DEFAULT_CURRENCY,
        "currency_aliases": {},
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If config file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        try:
            return tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Config file {config_path} is not valid TOML: {e}") from e


def load_config_or_empty(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration, treating a missing file as an empty config."""
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {}


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def set_rates_url(url: str, config_path: Path | None = None) -> str:
    """Store the rates endpoint URL.

    Args:
        url: Endpoint URL or path. Blank values store the default endpoint.
        config_path: Path to config file. If None, uses default location.

    Returns:
        The value that was stored.
    """
    config = load_config_or_empty(config_path)
    stored = url.strip() or DEFAULT_RATES_ENDPOINT
    config["rates_url"] = stored
    save_config(config, config_path)
    return stored


def clear_rates_url(config_path: Path | None = None) -> None:
    """Remove the rates endpoint URL so the default endpoint is used.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    config = load_config_or_empty(config_path)
    if "rates_url" in config:
        del config["rates_url"]
        save_config(config, config_path)


def get_default_currency(config_path: Path | None = None) -> str:
    """Get the currency reports use when none is requested."""
    value = load_config_or_empty(config_path).get("default_currency")
    if isinstance(value, str) and value.strip():
        return value.strip()
    return DEFAULT_CURRENCY


def get_currency_aliases(config_path: Path | None = None) -> dict[str, str]:
    """Get the currency alias table, with configured aliases over the built-in ones.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Mapping of upper-cased alias to upper-cased canonical code.
    """
    aliases = dict(CURRENCY_ALIASES)
    configured = load_config_or_empty(config_path).get("currency_aliases", {})
    if isinstance(configured, dict):
        for alias, canonical in configured.items():
            if isinstance(canonical, str) and canonical.strip():
                aliases[str(alias).strip().upper()] = canonical.strip().upper()
    return aliases


class TomlSettings:
    """Settings provider backed by the config file.

    The file is read on every call so changes apply to the next fetch.
    """

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path

    def get_rates_url(self) -> str | None:
        value = load_config_or_empty(self.config_path).get("rates_url")
        return value if isinstance(value, str) else None


class StaticSettings:
    """Settings provider with a fixed rates URL."""

    def __init__(self, rates_url: str | None = None) -> None:
        self.rates_url = rates_url

    def get_rates_url(self) -> str | None:
        return self.rates_url
