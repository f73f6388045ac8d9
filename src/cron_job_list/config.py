"""Configuration loader for cron-job-list."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

DEFAULT_PORT = 22
DEFAULT_COMMAND = "crontab -l"
YAML_SUFFIXES = (".yaml", ".yml")


def default_key_path() -> Path:
    """Private key used when none is given on the command line."""
    return Path("~/.ssh/id_rsa").expanduser()


@dataclass(frozen=True)
class Destination:
    """A single remote target."""

    host: str
    user: str

    @property
    def label(self) -> str:
        return f"{self.user}@{self.host}"


@dataclass(frozen=True)
class RunConfig:
    """Settings shared by every destination in a run."""

    config_path: Path
    key_path: Path = field(default_factory=default_key_path)
    port: int = DEFAULT_PORT
    command: str = DEFAULT_COMMAND
    quiet: bool = False
    max_concurrency: int | None = None
    dashboard: bool = False


def load_destinations(config_path: str | Path) -> list[Destination]:
    """Load the destination list from a JSON (or YAML) file."""
    config_path = Path(config_path)

    try:
        with open(config_path, encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config file {config_path} is not valid UTF-8: {e}") from e

    raw = _decode(text, config_path)
    return _parse_destinations(raw)


def _decode(text: str, config_path: Path) -> Any:
    """Decode the file body according to its suffix."""
    if config_path.suffix.lower() in YAML_SUFFIXES:
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e


def _parse_destinations(raw: Any) -> list[Destination]:
    """Parse the decoded document into Destination objects."""
    if not isinstance(raw, list):
        raise ConfigError("Config must be a list of {host, user} objects")

    return [_parse_destination(i, entry) for i, entry in enumerate(raw)]


def _parse_destination(index: int, entry: Any) -> Destination:
    """Parse a single destination entry."""
    if not isinstance(entry, dict):
        raise ConfigError(f"Destination #{index} must be an object")

    values = {}
    for key in ("host", "user"):
        value = entry.get(key)
        if not isinstance(value, str) or not value:
            raise ConfigError(f"Destination #{index} must have a '{key}' string field")
        values[key] = value

    return Destination(host=values["host"], user=values["user"])
