"""User configuration for the editor.

Settings are read from a JSON file in the OS-appropriate config directory.
Every entry is optional; anything missing or invalid falls back to the
defaults in ``EditorConstants`` and is reported through logging.
"""

from __future__ import annotations

import json
import logging
import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs
from blessed.formatters import COLORS

from .constants import EditorConstants

logger = logging.getLogger(__name__)

HEX_DIGITS = frozenset(string.hexdigits)

# Foreground-style names; the renderer composes "<fg>_on_<bg>" from them
COLOR_NAMES = frozenset(c for c in COLORS if not c.startswith("on_"))


@dataclass(frozen=True)
class Palette:
    normal_fg: str = EditorConstants.NORMAL_FG
    normal_bg: str = EditorConstants.NORMAL_BG
    bar_fg: str = EditorConstants.BAR_FG
    bar_bg: str = EditorConstants.BAR_BG


@dataclass
class EditorConfig:
    frame_interval: float = EditorConstants.FRAME_INTERVAL
    palette: Palette = field(default_factory=Palette)
    keys: Dict[str, str] = field(default_factory=lambda: dict(EditorConstants.DEFAULT_KEYS))


def default_config_path() -> Path:
    return Path(platformdirs.user_config_dir(EditorConstants.APP_NAME)) / EditorConstants.CONFIG_FILENAME


class ConfigLoader:
    """Loads and validates the user's configuration file."""

    def __init__(self, path: Optional[Path] = None):
        self._config_file = Path(path) if path is not None else default_config_path()
        self._config_cache: Optional[EditorConfig] = None

    @property
    def path(self) -> Path:
        return self._config_file

    def _read_raw(self) -> Dict[str, Any]:
        if not self._config_file.exists():
            return {}
        try:
            with open(self._config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load config from {self._config_file}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning("Config file has invalid format (not a dict), ignoring")
            return {}
        return data

    def load(self) -> EditorConfig:
        """Return the effective configuration (cached after the first call)."""
        if self._config_cache is not None:
            return self._config_cache
        raw = self._read_raw()
        self._config_cache = EditorConfig(
            frame_interval=self._parse_frame_interval(raw.get('frame_interval')),
            palette=self._parse_palette(raw.get('colors')),
            keys=self._parse_keys(raw.get('keys')),
        )
        return self._config_cache

    def clear_cache(self) -> None:
        self._config_cache = None

    @staticmethod
    def _parse_frame_interval(value: Any) -> float:
        if value is None:
            return EditorConstants.FRAME_INTERVAL
        # bool is an int subclass; reject it explicitly
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning(f"frame_interval must be a number, got {value!r}")
            return EditorConstants.FRAME_INTERVAL
        if not 0 < value <= EditorConstants.MAX_FRAME_INTERVAL:
            logger.warning(f"frame_interval {value} out of range, using default")
            return EditorConstants.FRAME_INTERVAL
        return float(value)

    @staticmethod
    def _parse_palette(value: Any) -> Palette:
        if value is None:
            return Palette()
        if not isinstance(value, dict):
            logger.warning("colors must be an object, ignoring")
            return Palette()
        colors = {}
        for name in ('normal_fg', 'normal_bg', 'bar_fg', 'bar_bg'):
            color = value.get(name)
            if color is None:
                continue
            if isinstance(color, str) and color in COLOR_NAMES:
                colors[name] = color
            else:
                logger.warning(f"Invalid color for {name}: {color!r}")
        return Palette(**colors)

    @staticmethod
    def _parse_keys(value: Any) -> Dict[str, str]:
        keys = dict(EditorConstants.DEFAULT_KEYS)
        if value is None:
            return keys
        if not isinstance(value, dict):
            logger.warning("keys must be an object, ignoring")
            return keys
        for action, key in value.items():
            if action not in keys:
                logger.warning(f"Unknown key binding action: {action!r}")
                continue
            if not (isinstance(key, str) and len(key) == 1 and key.isprintable() and key != ' '):
                logger.warning(f"Key for {action} must be one printable character, got {key!r}")
                continue
            if key in HEX_DIGITS:
                logger.warning(f"Key {key!r} for {action} is a hex digit and is reserved for editing")
                continue
            keys[action] = key
        if len(set(keys.values())) != len(keys):
            logger.warning("Duplicate key bindings in config, using default bindings")
            return dict(EditorConstants.DEFAULT_KEYS)
        return keys
