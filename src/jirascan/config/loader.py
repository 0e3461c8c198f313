"""Configuration loading with environment variable merging."""

import os
import tomllib
from pathlib import Path
from typing import Any

import typer

from jirascan.config.models import Configuration
from jirascan.exceptions import ConfigError


def get_config_path(config_arg: Path | None = None) -> Path:
    """
    Get configuration file path with priority order.

    Priority:
    1. Command-line argument
    2. JIRASCAN_CONFIG environment variable
    3. <app dir>/config.toml (user home directory)
    4. ./jirascan.toml (current working directory)

    Args:
        config_arg: Optional path from command-line argument

    Returns:
        Path to configuration file (may not exist)
    """
    if config_arg:
        return config_arg

    env_config = os.getenv("JIRASCAN_CONFIG")
    if env_config:
        return Path(env_config)

    app_dir = Path(typer.get_app_dir("jirascan"))
    user_config = app_dir / "config.toml"
    if user_config.exists():
        return user_config

    cwd_config = Path("jirascan.toml")
    if cwd_config.exists():
        return cwd_config

    # Default (may not exist)
    return user_config


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"Invalid {name} value: {value}") from None


def _apply_jira_env(jira_config: dict[str, Any]) -> None:
    """Override connection settings from the environment (JIRASCAN_ or JIRA_ prefix)."""
    if base_url := (os.getenv("JIRASCAN_BASE_URL") or os.getenv("JIRA_BASE_URL")):
        jira_config["base_url"] = base_url
    if username := (os.getenv("JIRASCAN_USERNAME") or os.getenv("JIRA_USERNAME")):
        jira_config["username"] = username
    if api_token := (os.getenv("JIRASCAN_API_TOKEN") or os.getenv("JIRA_API_TOKEN")):
        jira_config["api_token"] = api_token
    if (timeout := _env_int("JIRASCAN_TIMEOUT")) is not None:
        jira_config["timeout"] = timeout


def load_config(config_path: Path | None = None) -> Configuration:
    """
    Load and validate configuration from TOML file and environment variables.

    Environment variables override config file values (or provide all values if no file exists):
    - JIRASCAN_BASE_URL (alias JIRA_BASE_URL)
    - JIRASCAN_USERNAME (alias JIRA_USERNAME)
    - JIRASCAN_API_TOKEN (alias JIRA_API_TOKEN)
    - JIRASCAN_TIMEOUT (optional, request timeout in seconds)
    - JIRASCAN_WORKERS (optional, default worker lane count)

    Args:
        config_path: Optional path to config file

    Returns:
        Validated Configuration object

    Raises:
        ConfigError: If config file invalid or required values missing
    """
    path = get_config_path(config_path)

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML syntax in {path}: {e}") from e

    # Accept both a top-level layout and one nested under [jirascan]
    if "jirascan" in data:
        data = data["jirascan"]

    if data:
        jira_config = data.setdefault("jira", {})
        _apply_jira_env(jira_config)
        if "base_url" not in jira_config:
            raise ConfigError(f"Missing 'jira.base_url' in {path}")
    else:
        jira_config = {}
        _apply_jira_env(jira_config)
        if "base_url" not in jira_config:
            raise ConfigError(
                "No config file found and JIRASCAN_BASE_URL/JIRA_BASE_URL environment variable not set. "
                "Either create a config file or set environment variables: "
                "JIRASCAN_BASE_URL (or JIRA_BASE_URL), JIRASCAN_USERNAME (or JIRA_USERNAME), "
                "JIRASCAN_API_TOKEN (or JIRA_API_TOKEN)"
            )
        data = {"jira": jira_config}

    if (workers := _env_int("JIRASCAN_WORKERS")) is not None:
        data.setdefault("scan", {})["workers"] = workers

    try:
        return Configuration(**data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
