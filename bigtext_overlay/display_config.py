"""Committed display configuration and the editable settings draft."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

_CLIENT_LOGGER = logging.getLogger("BigText.Overlay.Client")

FONT_RATIO_MIN = 0.1
FONT_RATIO_MAX = 0.9
FONT_RATIO_DEFAULT = 0.5

FIELD_TEXT = "text"
FIELD_COLOR = "color"
FIELD_FONT_SIZE_RATIO = "font_size_ratio"
FIELD_MIRRORED = "mirrored"
EDITABLE_FIELDS: Tuple[str, ...] = (FIELD_TEXT, FIELD_COLOR, FIELD_FONT_SIZE_RATIO, FIELD_MIRRORED)
_FIELD_ALIASES = {
    "fontSizeRatio": FIELD_FONT_SIZE_RATIO,
    "font_ratio": FIELD_FONT_SIZE_RATIO,
}


def _clamp_channel(value: int) -> int:
    return max(0, min(255, int(value)))


@dataclass(frozen=True)
class RGBA:
    """8-bit RGBA color."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def __post_init__(self) -> None:
        for name in ("red", "green", "blue", "alpha"):
            object.__setattr__(self, name, _clamp_channel(getattr(self, name)))

    @classmethod
    def from_floats(cls, red: float, green: float, blue: float, alpha: float = 1.0) -> "RGBA":
        def _scale(channel: float) -> int:
            value = float(channel)
            if not math.isfinite(value):
                value = 0.0
            return int(round(max(0.0, min(1.0, value)) * 255))

        return cls(_scale(red), _scale(green), _scale(blue), _scale(alpha))

    def as_tuple(self) -> Tuple[int, int, int, int]:
        return (self.red, self.green, self.blue, self.alpha)

    def hex(self) -> str:
        return "#{:02x}{:02x}{:02x}{:02x}".format(*self.as_tuple())


WHITE = RGBA(255, 255, 255, 255)


def _parse_hex_color(token: str) -> Optional[RGBA]:
    raw = token.strip()
    if raw.startswith("#"):
        raw = raw[1:]
    if len(raw) not in (6, 8):
        return None
    try:
        channels = [int(raw[index : index + 2], 16) for index in range(0, len(raw), 2)]
    except ValueError:
        return None
    return RGBA(*channels)


def coerce_color(value: Any, fallback: Optional[RGBA] = None) -> Optional[RGBA]:
    """Return an RGBA for a hex string or a 3/4 channel sequence; otherwise fallback.

    Hex strings are ``rrggbb`` or ``rrggbbaa`` with an optional ``#``. A
    sequence is read as unit floats only when it holds at least one float and
    every channel lies in [0, 1]; any other numeric sequence is 8-bit, so
    ``(1, 1, 1)`` is near-black while ``(1.0, 1.0, 1.0)`` is white. Settings
    files should prefer hex strings, which have no such ambiguity.
    """
    if isinstance(value, RGBA):
        return value
    if isinstance(value, str):
        parsed = _parse_hex_color(value)
        return parsed if parsed is not None else fallback
    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        if any(isinstance(item, bool) or not isinstance(item, (int, float)) for item in value):
            return fallback
        if any(isinstance(item, float) and not math.isfinite(item) for item in value):
            return fallback
        if any(isinstance(item, float) for item in value) and all(0.0 <= item <= 1.0 for item in value):
            return RGBA.from_floats(*value)
        return RGBA(*(int(round(item)) for item in value))
    return fallback


def coerce_flag(value: Any) -> Optional[bool]:
    """Return a bool for bools, numbers and on/off style strings; None when unrecognised."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        token = value.strip().lower()
        if token in {"1", "true", "yes", "on"}:
            return True
        if token in {"0", "false", "no", "off", ""}:
            return False
    return None


def clamp_font_ratio(value: Any, fallback: float = FONT_RATIO_DEFAULT) -> float:
    """Clamp a font-size ratio into [0.1, 0.9]; non-numeric input yields the clamped fallback."""
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        numeric = float(fallback)
    if not math.isfinite(numeric):
        numeric = float(fallback)
    return max(FONT_RATIO_MIN, min(FONT_RATIO_MAX, numeric))


def resolve_field_name(name: str) -> Optional[str]:
    token = _FIELD_ALIASES.get(name, name)
    return token if token in EDITABLE_FIELDS else None


@dataclass(frozen=True)
class DisplayConfig:
    """What the overlay renders. Replaced wholesale, never mutated."""

    text: str = ""
    color: RGBA = WHITE
    font_size_ratio: float = FONT_RATIO_DEFAULT
    mirrored: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "text", "" if self.text is None else str(self.text))
        object.__setattr__(self, "color", coerce_color(self.color, WHITE))
        object.__setattr__(self, "font_size_ratio", clamp_font_ratio(self.font_size_ratio))
        object.__setattr__(self, "mirrored", bool(coerce_flag(self.mirrored)))


@dataclass
class SettingsDraft:
    """Mutable working copy edited while the settings panel is open."""

    text: str
    color: RGBA
    font_size_ratio: float
    mirrored: bool
    closed: bool = False

    def set_field(self, name: str, value: Any) -> bool:
        """Apply one edit; returns True when the stored value changed."""
        if self.closed:
            _CLIENT_LOGGER.debug("Ignoring edit of '%s' on a closed settings draft", name)
            return False
        field_name = resolve_field_name(name)
        if field_name is None:
            _CLIENT_LOGGER.debug("Ignoring edit of unknown settings field '%s'", name)
            return False
        if field_name == FIELD_TEXT:
            new_value: Any = "" if value is None else str(value)
        elif field_name == FIELD_COLOR:
            new_value = coerce_color(value)
            if new_value is None:
                _CLIENT_LOGGER.debug("Ignoring unparseable color %r", value)
                return False
        elif field_name == FIELD_FONT_SIZE_RATIO:
            new_value = clamp_font_ratio(value, fallback=self.font_size_ratio)
        else:
            new_value = coerce_flag(value)
            if new_value is None:
                _CLIENT_LOGGER.debug("Ignoring unparseable mirrored flag %r", value)
                return False
        if getattr(self, field_name) == new_value:
            return False
        setattr(self, field_name, new_value)
        return True


def create_draft(config: DisplayConfig) -> SettingsDraft:
    return SettingsDraft(
        text=config.text,
        color=config.color,
        font_size_ratio=config.font_size_ratio,
        mirrored=config.mirrored,
    )


def commit(draft: SettingsDraft) -> DisplayConfig:
    """Build the new committed config from every draft field, then close the draft."""
    config = DisplayConfig(
        text=draft.text,
        color=draft.color,
        font_size_ratio=draft.font_size_ratio,
        mirrored=draft.mirrored,
    )
    draft.closed = True
    return config


def discard(draft: SettingsDraft) -> None:
    draft.closed = True
