from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from bigtext_overlay.display_config import RGBA, DisplayConfig
from bigtext_overlay.layout_engine import Layout, ViewportMetrics, compute_layout

if TYPE_CHECKING:
    from bigtext_overlay.settings_controller import SettingsController
    from bigtext_overlay.viewport_monitor import ViewportMonitor

_CLIENT_LOGGER = logging.getLogger("BigText.Overlay.Client")

RenderFn = Callable[[str, RGBA, int, int], None]
DrawUpdate = Tuple[str, RGBA, int, int]


class DisplayPresenter:
    """Recomputes layout on config or viewport changes and pushes it to the render sink."""

    def __init__(
        self,
        *,
        render_fn: RenderFn,
        initial_config: DisplayConfig,
        log_fn: Optional[Callable[..., None]] = None,
    ) -> None:
        if render_fn is None:
            raise ValueError("DisplayPresenter requires a render sink")
        self._render = render_fn
        self._config = initial_config
        self._log = log_fn or _CLIENT_LOGGER.debug
        self._viewport: Optional[ViewportMetrics] = None
        self._layout: Optional[Layout] = None
        self._last_draw: Optional[DrawUpdate] = None

    @property
    def config(self) -> DisplayConfig:
        return self._config

    @property
    def layout(self) -> Optional[Layout]:
        return self._layout

    def bind(self, controller: "SettingsController", monitor: "ViewportMonitor") -> None:
        self._config = controller.config
        controller.subscribe(self.handle_config_replaced)
        monitor.subscribe(self.handle_viewport_changed)
        if monitor.metrics is not None:
            self.handle_viewport_changed(monitor.metrics)

    def handle_config_replaced(self, config: DisplayConfig) -> None:
        self._config = config
        self.refresh()

    def handle_viewport_changed(self, metrics: ViewportMetrics) -> None:
        self._viewport = metrics
        self.refresh()

    def refresh(self, *, force: bool = False) -> Optional[Layout]:
        viewport = self._viewport
        if viewport is None:
            self._log("Skipping render; viewport metrics not yet known")
            return None
        config = self._config
        layout = compute_layout(config, viewport)
        self._layout = layout
        draw: DrawUpdate = (config.text, config.color, layout.font_size_px, layout.horizontal_scale)
        if not force and draw == self._last_draw:
            return layout
        self._last_draw = draw
        self._log(
            "Rendering overlay: font_size_px=%d scale=%d viewport=%dx%d",
            layout.font_size_px,
            layout.horizontal_scale,
            viewport.width,
            viewport.height,
        )
        self._render(*draw)
        return layout
