from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from bigtext_overlay.layout_engine import ViewportMetrics

_CLIENT_LOGGER = logging.getLogger("BigText.Overlay.Client")

ViewportCallback = Callable[[ViewportMetrics], None]


class ViewportMonitor:
    """Tracks surface size and notifies subscribers when it actually changes."""

    def __init__(self, *, log_fn: Optional[Callable[..., None]] = None) -> None:
        self._log = log_fn or _CLIENT_LOGGER.debug
        self._subscribers: List[ViewportCallback] = []
        self._metrics: Optional[ViewportMetrics] = None

    @property
    def metrics(self) -> Optional[ViewportMetrics]:
        return self._metrics

    def subscribe(self, callback: ViewportCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: ViewportCallback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    def update(self, width: int, height: int) -> bool:
        metrics = ViewportMetrics(width=width, height=height)
        if metrics == self._metrics:
            return False
        previous = self._metrics
        self._metrics = metrics
        self._log(
            "Viewport changed: %s -> %dx%d",
            "none" if previous is None else f"{previous.width}x{previous.height}",
            metrics.width,
            metrics.height,
        )
        for callback in list(self._subscribers):
            try:
                callback(metrics)
            except Exception:
                _CLIENT_LOGGER.exception("Viewport subscriber %r failed", callback)
        return True

    def poll(self, size_fn: Callable[[], Tuple[int, int]]) -> bool:
        width, height = size_fn()
        return self.update(width, height)
