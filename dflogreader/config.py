"""User configuration: extra log formats and the logging level."""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import click

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from dflogreader.errors import ConfigurationError
from dflogreader.formats import BUILTIN_FORMATS
from dflogreader.log.records import FormatDescriptor

log = logging.getLogger(__name__)

CONFIG_ENV = "DFLOGREADER_CONFIG"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class Config:
    log_level: str = DEFAULT_LOG_LEVEL
    formats: dict[str, FormatDescriptor] = field(default_factory=dict)

    def all_formats(self) -> dict[str, FormatDescriptor]:
        """Built-in formats with user formats layered on top."""
        merged = dict(BUILTIN_FORMATS)
        for name, descriptor in self.formats.items():
            if name in merged:
                log.warning("Format %s from config overrides the built-in definition", name)
            merged[name] = descriptor
        return merged


def get_config_path() -> Path:
    """Return the TOML config path: $DFLOGREADER_CONFIG or click.get_app_dir."""
    env = os.environ.get(CONFIG_ENV)
    if env:
        return Path(env)
    return Path(click.get_app_dir("dflogreader")) / "config.toml"


def load_config(path: Optional[Path] = None) -> Config:
    """Read TOML config. Returns empty Config if file missing."""
    path = path if path is not None else get_config_path()
    if not path.exists():
        log.debug("No config file at %s", path)
        return Config()

    with open(path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    config = parse_config(data)
    log.debug("Loaded %d formats from %s", len(config.formats), path)
    return config


def parse_config(data: dict[str, Any]) -> Config:
    level = str(data.get("log_level", DEFAULT_LOG_LEVEL)).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown log_level '{level}'")

    config = Config(log_level=level)
    formats = data.get("formats", {})
    if not isinstance(formats, dict):
        raise ConfigurationError("'formats' must be a table of [formats.NAME] entries")
    for name, table in formats.items():
        if not isinstance(table, dict):
            raise ConfigurationError(f"[formats.{name}] must be a table")
        config.formats[name] = FormatDescriptor.from_mapping(name, table)
    return config
