"""Helpers for computing the concrete overlay layout from a display config."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from bigtext_overlay.display_config import DisplayConfig

CENTERED_OFFSET: Tuple[int, int] = (0, 0)


@dataclass(frozen=True)
class ViewportMetrics:
    width: int
    height: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", max(0, int(self.width)))
        object.__setattr__(self, "height", max(0, int(self.height)))


@dataclass(frozen=True)
class Layout:
    """Resolved pixel size, flip and anchor for one draw update."""

    font_size_px: int
    horizontal_scale: int
    anchored_offset: Tuple[int, int] = CENTERED_OFFSET


def compute_layout(config: DisplayConfig, viewport: ViewportMetrics) -> Layout:
    """Return the layout for the given config and surface size.

    Font size follows the viewport height so the text stays proportionally
    large in either orientation. Mirroring is a transform flip; the text
    itself is never reordered. The text is always anchored at the centre.
    A zero-height viewport yields a zero font size.
    """

    font_size_px = int(round(viewport.height * config.font_size_ratio))
    horizontal_scale = -1 if config.mirrored else 1
    return Layout(
        font_size_px=max(0, font_size_px),
        horizontal_scale=horizontal_scale,
        anchored_offset=CENTERED_OFFSET,
    )
