"""Configuration helpers for the BigText overlay client."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from bigtext_overlay.debug_config import CLIENT_LOG_RETENTION_DEFAULT, coerce_log_retention
from bigtext_overlay.display_config import (
    FONT_RATIO_DEFAULT,
    RGBA,
    WHITE,
    DisplayConfig,
    clamp_font_ratio,
    coerce_color,
)

_CLIENT_LOGGER = logging.getLogger("BigText.Overlay.Client")

SETTINGS_FILENAME = "bigtext_settings.json"
SETTINGS_ENV_VAR = "BIGTEXT_OVERLAY_SETTINGS"
DEFAULT_TEXT = "BIG TEXT"


@dataclass
class InitialDisplaySettings:
    """Values used to seed the committed display config at startup."""

    text: str = DEFAULT_TEXT
    color: RGBA = WHITE
    font_size_ratio: float = FONT_RATIO_DEFAULT
    font_family: Optional[str] = None
    log_retention: int = CLIENT_LOG_RETENTION_DEFAULT
    start_fullscreen: bool = False

    def to_display_config(self) -> DisplayConfig:
        return DisplayConfig(
            text=self.text,
            color=self.color,
            font_size_ratio=clamp_font_ratio(self.font_size_ratio),
            mirrored=False,
        )


def resolve_settings_path(cli_value: Optional[str], *, package_dir: Path) -> Path:
    if cli_value:
        return Path(cli_value).expanduser().resolve()
    env_override = os.getenv(SETTINGS_ENV_VAR)
    if env_override:
        return Path(env_override).expanduser().resolve()
    return (package_dir.parent / SETTINGS_FILENAME).resolve()


def load_initial_settings(settings_path: Path) -> InitialDisplaySettings:
    """Read bootstrap defaults from bigtext_settings.json if it exists."""
    defaults = InitialDisplaySettings()
    try:
        raw = settings_path.read_text(encoding="utf-8")
    except (FileNotFoundError, OSError):
        _CLIENT_LOGGER.debug("Settings file not found at %s; using defaults", settings_path)
        return defaults

    try:
        data: Dict[str, Any] = json.loads(raw)
    except json.JSONDecodeError as exc:
        _CLIENT_LOGGER.warning("Failed to parse %s; using defaults (%s)", settings_path, exc)
        return defaults
    if not isinstance(data, dict):
        _CLIENT_LOGGER.warning("Settings at %s is not a JSON object; using defaults", settings_path)
        return defaults

    text_value = data.get("text", defaults.text)
    text = defaults.text if text_value is None else str(text_value)

    color = defaults.color
    if "color" in data:
        parsed = coerce_color(data.get("color"))
        if parsed is None:
            _CLIENT_LOGGER.warning("Ignoring invalid color in %s: %r", settings_path, data.get("color"))
        else:
            color = parsed

    raw_ratio = data.get("font_size_ratio", defaults.font_size_ratio)
    font_size_ratio = clamp_font_ratio(raw_ratio, fallback=defaults.font_size_ratio)
    if isinstance(raw_ratio, (int, float)) and font_size_ratio != raw_ratio:
        _CLIENT_LOGGER.info("Clamped font_size_ratio %r to %.2f", raw_ratio, font_size_ratio)

    family_value = data.get("font_family")
    font_family = str(family_value).strip() if isinstance(family_value, str) and family_value.strip() else None

    return InitialDisplaySettings(
        text=text,
        color=color,
        font_size_ratio=font_size_ratio,
        font_family=font_family,
        log_retention=coerce_log_retention(data.get("log_retention"), defaults.log_retention),
        start_fullscreen=bool(data.get("start_fullscreen", defaults.start_fullscreen)),
    )
