"""
Persisted CLI configuration: API base URL and key, stored as YAML.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

import yaml

from yougile_cli.core.client import CLIError

DEFAULT_BASE_URL = "https://ru.yougile.com"
CONFIG_DIR_NAME = "yougile-cli"
CONFIG_FILE_NAME = "config.yaml"
CONFIG_ENV_VAR = "YOUGILE_CONFIG"


class ConfigError(CLIError):
    """Config file could not be read, parsed, or written."""


@dataclass
class Config:
    """YouGile CLI configuration."""

    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""

    def to_dict(self) -> dict[str, str]:
        """Convert to dict for YAML/JSON output."""
        return {"base_url": self.base_url, "api_key": self.api_key}


def user_config_dir() -> Path:
    """Per-user config directory for the current platform."""
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if appdata:
            return Path(appdata)
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".config"


def default_config_path() -> Path:
    """Default config file location, e.g. ~/.config/yougile-cli/config.yaml."""
    return user_config_dir() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def resolve_config_path(flag_value: str | None = None) -> Path:
    """The --config flag if set, then $YOUGILE_CONFIG, then the default location."""
    if flag_value:
        return Path(flag_value).expanduser()
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()
    return default_config_path()


def load_config(path: str | Path) -> Config:
    """
    Read and parse the config file at path.

    A blank or missing base_url falls back to DEFAULT_BASE_URL.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a valid config mapping

    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"read config: {e}")

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"parse config: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("parse config: expected a mapping with base_url and api_key")

    for key in ("base_url", "api_key"):
        value = data.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"parse config: {key} must be a string")

    return Config(
        base_url=data.get("base_url") or DEFAULT_BASE_URL,
        api_key=data.get("api_key") or "",
    )


def save_config(path: str | Path, cfg: Config | None) -> None:
    """
    Write cfg to path as YAML, readable by the owner only.

    Parent directories are created with mode 0700. The file is overwritten in place.

    Raises:
        ConfigError: On any I/O error

    """
    if cfg is None:
        raise ConfigError("config is empty")

    path = Path(path)
    try:
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"create config dir: {e}")

    text = yaml.safe_dump(cfg.to_dict(), sort_keys=False)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # O_CREAT mode does not apply to a file that already existed
        os.chmod(path, 0o600)
    except OSError as e:
        raise ConfigError(f"write config: {e}")
