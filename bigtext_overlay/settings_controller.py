from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Any, Callable, Deque, List, Optional

from bigtext_overlay.display_config import (
    DisplayConfig,
    SettingsDraft,
    commit,
    create_draft,
    discard,
)

_CLIENT_LOGGER = logging.getLogger("BigText.Overlay.Client")

ConfigCallback = Callable[[DisplayConfig], None]


class PanelState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class SettingsController:
    """Owns the committed display config and runs the settings panel transaction.

    Opening the panel snapshots the committed config into a draft. Edits only
    touch the draft; ``confirm`` replaces the committed config in one step and
    ``cancel`` drops the draft. Calls that do not match the current state are
    ignored so duplicate button events are harmless.

    Events fired from inside a callback the controller is running (the panel
    sink or a config subscriber) are queued and processed once the current
    event has finished.
    """

    def __init__(
        self,
        initial_config: DisplayConfig,
        *,
        set_panel_visible_fn: Callable[[bool], None],
        log_fn: Optional[Callable[..., None]] = None,
    ) -> None:
        if set_panel_visible_fn is None:
            raise ValueError("SettingsController requires a panel visibility sink")
        self._config = initial_config
        self._set_panel_visible = set_panel_visible_fn
        self._log = log_fn or _CLIENT_LOGGER.debug
        self._state = PanelState.CLOSED
        self._draft: Optional[SettingsDraft] = None
        self._subscribers: List[ConfigCallback] = []
        self._pending: Deque[Callable[[], None]] = deque()
        self._dispatching = False

    @property
    def config(self) -> DisplayConfig:
        return self._config

    @property
    def state(self) -> PanelState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is PanelState.OPEN

    @property
    def draft(self) -> Optional[SettingsDraft]:
        return self._draft

    def subscribe(self, callback: ConfigCallback) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: ConfigCallback) -> None:
        try:
            self._subscribers.remove(callback)
        except ValueError:
            pass

    # Events --------------------------------------------------------------

    def open(self) -> None:
        self._dispatch(self._handle_open)

    def edit_field(self, field: str, value: Any) -> None:
        self._dispatch(lambda: self._handle_edit(field, value))

    def confirm(self) -> None:
        self._dispatch(self._handle_confirm)

    def cancel(self) -> None:
        self._dispatch(self._handle_cancel)

    def toggle(self) -> None:
        """Settings button: open when closed, close without applying when open."""
        self._dispatch(self._handle_toggle)

    # Internals -----------------------------------------------------------

    def _dispatch(self, handler: Callable[[], None]) -> None:
        self._pending.append(handler)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                self._pending.popleft()()
        finally:
            self._dispatching = False
            self._pending.clear()

    def _handle_toggle(self) -> None:
        if self._state is PanelState.OPEN:
            self._handle_cancel()
        else:
            self._handle_open()

    def _handle_open(self) -> None:
        if self._state is PanelState.OPEN:
            self._log("Settings panel already open; ignoring open()")
            return
        self._draft = create_draft(self._config)
        self._state = PanelState.OPEN
        self._log("Settings panel opened")
        self._set_panel_visible(True)

    def _handle_edit(self, field: str, value: Any) -> None:
        draft = self._draft
        if self._state is not PanelState.OPEN or draft is None:
            self._log("Settings panel closed; ignoring edit of '%s'", field)
            return
        if draft.set_field(field, value):
            self._log("Draft field '%s' updated", field)

    def _handle_confirm(self) -> None:
        draft = self._draft
        if self._state is not PanelState.OPEN or draft is None:
            self._log("Settings panel closed; ignoring confirm()")
            return
        new_config = commit(draft)
        self._config = new_config
        self._draft = None
        self._state = PanelState.CLOSED
        self._log(
            "Settings applied: text_len=%d color=%s ratio=%.2f mirrored=%s",
            len(new_config.text),
            new_config.color.hex(),
            new_config.font_size_ratio,
            new_config.mirrored,
        )
        self._set_panel_visible(False)
        self._notify(new_config)

    def _handle_cancel(self) -> None:
        draft = self._draft
        if self._state is not PanelState.OPEN or draft is None:
            self._log("Settings panel closed; ignoring cancel()")
            return
        discard(draft)
        self._draft = None
        self._state = PanelState.CLOSED
        self._log("Settings edits discarded")
        self._set_panel_visible(False)

    def _notify(self, config: DisplayConfig) -> None:
        for callback in list(self._subscribers):
            try:
                callback(config)
            except Exception:
                _CLIENT_LOGGER.exception("Display config subscriber %r failed", callback)
