"""Configuration via an optional YAML file."""

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .parsing import Mail2EsError


GLOBAL_CONFIG_DIR = Path.home() / ".config" / "mail2es"
CONFIG_FILE = "config.yaml"
CONFIG_ENV = "MAIL2ES_CONFIG"

DATE_FORMATS = ("timestamp", "string")


class ConfigError(Mail2EsError):
    """Invalid configuration file or value."""


@dataclass
class Config:
    """Output and diagnostic settings for one run."""
    date_format: str = "timestamp"  # "timestamp" (epoch seconds) or "string" (Date header text)
    pretty: bool = True
    verbose: bool = False

    def __post_init__(self):
        if self.date_format not in DATE_FORMATS:
            raise ConfigError(
                f"Invalid date_format {self.date_format!r}. Use one of: {', '.join(DATE_FORMATS)}"
            )


def find_config_path(path: Path | str | None = None) -> Path | None:
    """Locate the config file.

    An explicit path wins, then $MAIL2ES_CONFIG, then ~/.config/mail2es/config.yaml.
    Returns None if no file applies.
    """
    if path:
        return Path(path)
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    default = GLOBAL_CONFIG_DIR / CONFIG_FILE
    return default if default.exists() else None


def load_config(path: Path | str | None = None) -> Config:
    """Load config from YAML, falling back to defaults."""
    config_path = find_config_path(path)
    if config_path is None:
        return Config()
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e.strerror or e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {config_path}")

    return Config(
        date_format=data.get("date_format", "timestamp"),
        pretty=bool(data.get("pretty", True)),
        verbose=bool(data.get("verbose", False)),
    )


def save_config(config: Config, path: Path | str | None = None) -> Path:
    """Save config to YAML. Returns the path written."""
    config_path = Path(path) if path else GLOBAL_CONFIG_DIR / CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "date_format": config.date_format,
        "pretty": config.pretty,
        "verbose": config.verbose,
    }
    with open(config_path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    return config_path
