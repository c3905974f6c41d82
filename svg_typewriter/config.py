"""Configuration for svg-typewriter.

Holds the request defaults and the font embedding settings. Values can
be overridden from a YAML file::

    defaults:
      font: Fira Code
      width: 600

    fonts:
      enabled: false
      timeout: 5
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml

from svg_typewriter.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SVG_TYPEWRITER_CONFIG"
DEFAULT_CONFIG_NAME = "svg-typewriter.yaml"


@dataclass(frozen=True)
class Defaults:
    """Values used for request parameters that are not given."""

    text: str = "Hello, World!"
    font: str = "Courier Prime"
    color: str = "#000000"
    font_size: int = 28
    letter_spacing: str = "0.1em"
    typing_speed: float = 0.5
    delete_speed: float = 0.5
    font_weight: str = "400"
    width: int = 450
    height: int = 150
    pause: int = 1000
    repeat: bool = True
    background_color: str = "#ffffff"
    background_opacity: float = 1.0
    center: bool = True
    v_center: bool = True
    border: bool = True
    cursor_style: str = "straight"
    font_ratio: float = 0.6
    deletion_behavior: str = "backspace"


@dataclass(frozen=True)
class FontConfig:
    """Settings for fetching and embedding web fonts."""

    enabled: bool = True
    timeout: float = 10.0
    max_workers: int = 4
    max_size: int = 5 * 1024 * 1024
    css_url: str = "https://fonts.googleapis.com/css2"
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
    )


@dataclass(frozen=True)
class Config:
    defaults: Defaults = field(default_factory=Defaults)
    fonts: FontConfig = field(default_factory=FontConfig)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load configuration, overlaying a YAML file on the built-in values.

        The file is ``path`` if given, else ``$SVG_TYPEWRITER_CONFIG``, else
        ``svg-typewriter.yaml`` in the working directory when it exists.

        Raises:
            ConfigError: If the file cannot be read or parsed.
        """
        if path is None:
            env_path = os.environ.get(CONFIG_ENV_VAR)
            if env_path:
                path = env_path
            elif Path(DEFAULT_CONFIG_NAME).is_file():
                path = DEFAULT_CONFIG_NAME
            else:
                return cls()

        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file: {path}", {"error": str(e)}) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid config file: {path}", {"error": str(e)}) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config file: {path}", {"error": "expected a mapping"})

        logger.debug("Loaded config from %s", path)
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        config = cls()
        return cls(
            defaults=_overlay(config.defaults, data.get("defaults", {})),
            fonts=_overlay(config.fonts, data.get("fonts", {})),
        )


def _overlay(section: Any, values: Any) -> Any:
    """Return ``section`` with known keys replaced from ``values``."""
    if not isinstance(values, dict):
        raise ConfigError("Config section must be a mapping", {"value": values})
    known = {f.name for f in fields(section)}
    updates = {}
    for key, value in values.items():
        name = key.replace("-", "_")
        if name in known:
            updates[name] = value
        else:
            logger.warning("Ignoring unknown config key: %s", key)
    return replace(section, **updates)
