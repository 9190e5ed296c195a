"""PyQt6 overlay window: draws the big text and hosts the settings panel."""
from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional, Tuple

from PyQt6.QtCore import QRectF, Qt, QTimer
from PyQt6.QtGui import QColor, QFont, QFontDatabase, QPainter
from PyQt6.QtWidgets import (
    QCheckBox,
    QColorDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from bigtext_overlay.client_config import InitialDisplaySettings
from bigtext_overlay.debug_config import DEBUG_CONFIG_ENABLED
from bigtext_overlay.display_config import (
    FIELD_COLOR,
    FIELD_FONT_SIZE_RATIO,
    FIELD_MIRRORED,
    FIELD_TEXT,
    FONT_RATIO_MAX,
    FONT_RATIO_MIN,
    RGBA,
    SettingsDraft,
)
from bigtext_overlay.display_presenter import DisplayPresenter
from bigtext_overlay.logging_utils import resolve_log_level
from bigtext_overlay.settings_controller import SettingsController
from bigtext_overlay.viewport_monitor import ViewportMonitor

_LOGGER_NAME = "BigText.Overlay.Client"
_CLIENT_LOGGER = logging.getLogger(_LOGGER_NAME)
_CLIENT_LOGGER.setLevel(resolve_log_level(DEBUG_CONFIG_ENABLED))
_CLIENT_LOGGER.propagate = False
# Opt-in propagation flag for environments/tests that want client logs upstream.
if os.environ.get("BIGTEXT_OVERLAY_PROPAGATE_LOGS", "").lower() in {"1", "true", "yes", "on"}:
    _CLIENT_LOGGER.propagate = True

DEFAULT_WINDOW_WIDTH = 540
DEFAULT_WINDOW_HEIGHT = 960
POLL_INTERVAL_MS = 250
SETTINGS_BUTTON_SIZE = 64
SETTINGS_BUTTON_MARGIN = 20
PANEL_INSET_RATIO = 0.2
BACKGROUND_COLOR = QColor(0, 0, 0)

_PANEL_STYLE = "background-color: rgba(26, 26, 26, 230); border-radius: 8px;"
_CONTROL_STYLE = "background-color: rgba(51, 51, 51, 204); color: #ffffff; font-size: 18px; padding: 6px;"


def _to_qcolor(color: RGBA) -> QColor:
    return QColor(color.red, color.green, color.blue, color.alpha)


def _resolve_font_family(preferred: Optional[str]) -> Optional[str]:
    if not preferred:
        return None
    target = preferred.strip().lower()
    for family in QFontDatabase.families():
        if family.lower() == target:
            _CLIENT_LOGGER.debug("Using font family '%s'", family)
            return family
    _CLIENT_LOGGER.warning("Font family '%s' not installed; falling back to toolkit default", preferred)
    return None


class SettingsPanel(QWidget):
    """Panel widgets wired to the controller's field-edit source."""

    def __init__(
        self,
        parent: QWidget,
        *,
        edit_fn: Callable[[str, Any], None],
        confirm_fn: Callable[[], None],
        cancel_fn: Callable[[], None],
    ) -> None:
        super().__init__(parent)
        self._edit = edit_fn
        self.setObjectName("SettingsPanel")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setStyleSheet(f"#SettingsPanel {{ {_PANEL_STYLE} }}")

        layout = QVBoxLayout(self)
        layout.setContentsMargins(20, 20, 20, 20)
        layout.setSpacing(20)

        self.text_input = QLineEdit(self)
        self.text_input.setPlaceholderText("Enter display text")
        self.text_input.setStyleSheet(_CONTROL_STYLE)
        self.text_input.textChanged.connect(lambda value: self._edit(FIELD_TEXT, value))
        self.text_input.returnPressed.connect(confirm_fn)
        layout.addWidget(self.text_input)

        color_row = QHBoxLayout()
        self.color_button = QPushButton("Choose text color", self)
        self.color_button.setStyleSheet(_CONTROL_STYLE)
        self.color_button.clicked.connect(self._pick_color)
        self.color_swatch = QLabel(self)
        self.color_swatch.setFixedSize(40, 40)
        color_row.addWidget(self.color_button, 1)
        color_row.addWidget(self.color_swatch)
        layout.addLayout(color_row)

        self.size_label = QLabel(self)
        self.size_label.setStyleSheet("color: #ffffff; font-size: 16px;")
        self.size_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.size_label)
        self.size_slider = QSlider(Qt.Orientation.Horizontal, self)
        self.size_slider.setRange(int(round(FONT_RATIO_MIN * 100)), int(round(FONT_RATIO_MAX * 100)))
        self.size_slider.valueChanged.connect(self._on_slider)
        layout.addWidget(self.size_slider)

        self.mirror_checkbox = QCheckBox("Mirror display", self)
        self.mirror_checkbox.setStyleSheet("color: #ffffff; font-size: 18px;")
        self.mirror_checkbox.toggled.connect(lambda checked: self._edit(FIELD_MIRRORED, checked))
        layout.addWidget(self.mirror_checkbox)

        buttons = QHBoxLayout()
        buttons.setSpacing(20)
        self.confirm_button = QPushButton("Confirm", self)
        self.confirm_button.setStyleSheet("background-color: #1a991a; color: #ffffff; font-size: 18px; padding: 8px;")
        self.confirm_button.clicked.connect(confirm_fn)
        self.cancel_button = QPushButton("Cancel", self)
        self.cancel_button.setStyleSheet("background-color: #991a1a; color: #ffffff; font-size: 18px; padding: 8px;")
        self.cancel_button.clicked.connect(cancel_fn)
        buttons.addWidget(self.confirm_button)
        buttons.addWidget(self.cancel_button)
        layout.addLayout(buttons)
        layout.addStretch(1)

        self._color = RGBA(255, 255, 255)

    def populate(self, draft: SettingsDraft) -> None:
        """Show the draft's values without echoing them back as edits."""
        widgets = (self.text_input, self.size_slider, self.mirror_checkbox)
        for widget in widgets:
            widget.blockSignals(True)
        try:
            self.text_input.setText(draft.text)
            self.size_slider.setValue(int(round(draft.font_size_ratio * 100)))
            self.mirror_checkbox.setChecked(draft.mirrored)
        finally:
            for widget in widgets:
                widget.blockSignals(False)
        self._set_size_label(self.size_slider.value())
        self._set_swatch(draft.color)

    def _on_slider(self, value: int) -> None:
        self._set_size_label(value)
        self._edit(FIELD_FONT_SIZE_RATIO, value / 100.0)

    def _set_size_label(self, value: int) -> None:
        self.size_label.setText(f"Font size: {value}%")

    def _set_swatch(self, color: RGBA) -> None:
        self._color = color
        self.color_swatch.setStyleSheet(
            f"background-color: rgba({color.red}, {color.green}, {color.blue}, {color.alpha}); border: 1px solid #888;"
        )

    def _pick_color(self) -> None:
        chosen = QColorDialog.getColor(
            _to_qcolor(self._color),
            self,
            "Text color",
            QColorDialog.ColorDialogOption.ShowAlphaChannel,
        )
        if not chosen.isValid():
            return
        self.apply_color(RGBA(chosen.red(), chosen.green(), chosen.blue(), chosen.alpha()))

    def apply_color(self, color: RGBA) -> None:
        self._set_swatch(color)
        self._edit(FIELD_COLOR, color)


class OverlayWindow(QWidget):
    """Full-window text overlay; implements the render and panel-visibility sinks."""

    def __init__(self, *, font_family: Optional[str] = None) -> None:
        super().__init__()
        self.setWindowTitle("BigText Overlay")
        self.resize(DEFAULT_WINDOW_WIDTH, DEFAULT_WINDOW_HEIGHT)
        self._font_family = _resolve_font_family(font_family)
        self._text = ""
        self._color = RGBA(255, 255, 255)
        self._font_size_px = 0
        self._horizontal_scale = 1
        self._controller: Optional[SettingsController] = None
        self._monitor: Optional[ViewportMonitor] = None
        self._presenter: Optional[DisplayPresenter] = None
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        self.settings_button = QPushButton("⚙", self)
        self.settings_button.setFixedSize(SETTINGS_BUTTON_SIZE, SETTINGS_BUTTON_SIZE)
        self.settings_button.setStyleSheet("background-color: #ffffff; color: #000000; font-size: 24px;")
        self.settings_button.clicked.connect(self._on_settings_button)

        self.panel = SettingsPanel(
            self,
            edit_fn=self._on_field_edit,
            confirm_fn=self._on_confirm,
            cancel_fn=self._on_cancel,
        )
        self.panel.hide()

        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(POLL_INTERVAL_MS)
        self._poll_timer.timeout.connect(self._poll_viewport)

    @property
    def controller(self) -> Optional[SettingsController]:
        return self._controller

    @property
    def presenter(self) -> Optional[DisplayPresenter]:
        return self._presenter

    def attach(
        self,
        controller: SettingsController,
        monitor: ViewportMonitor,
        presenter: Optional[DisplayPresenter] = None,
    ) -> None:
        self._controller = controller
        self._monitor = monitor
        self._presenter = presenter
        monitor.update(self.width(), self.height())

    @property
    def draw_state(self) -> Tuple[str, RGBA, int, int]:
        return (self._text, self._color, self._font_size_px, self._horizontal_scale)

    # Sinks -----------------------------------------------------------------

    def render_overlay(self, text: str, color: RGBA, font_size_px: int, horizontal_scale: int) -> None:
        self._text = text
        self._color = color
        self._font_size_px = font_size_px
        self._horizontal_scale = -1 if horizontal_scale < 0 else 1
        self.update()

    def set_panel_visible(self, visible: bool) -> None:
        if visible:
            controller = self._controller
            if controller is not None and controller.draft is not None:
                self.panel.populate(controller.draft)
            self._layout_children()
            self.panel.show()
            self.panel.raise_()
            self.panel.text_input.setFocus()
        else:
            self.panel.hide()
            self.setFocus()
        self.settings_button.raise_()

    # Panel wiring ----------------------------------------------------------

    def _on_settings_button(self) -> None:
        if self._controller is not None:
            self._controller.toggle()

    def _on_field_edit(self, field: str, value: Any) -> None:
        if self._controller is not None:
            self._controller.edit_field(field, value)

    def _on_confirm(self) -> None:
        if self._controller is not None:
            self._controller.confirm()

    def _on_cancel(self) -> None:
        if self._controller is not None:
            self._controller.cancel()

    def _poll_viewport(self) -> None:
        if self._monitor is not None:
            self._monitor.poll(lambda: (self.width(), self.height()))

    def _layout_children(self) -> None:
        width, height = self.width(), self.height()
        self.settings_button.move(
            max(0, width - SETTINGS_BUTTON_SIZE - SETTINGS_BUTTON_MARGIN),
            max(0, height - SETTINGS_BUTTON_SIZE - SETTINGS_BUTTON_MARGIN),
        )
        inset_x = int(width * PANEL_INSET_RATIO)
        inset_y = int(height * PANEL_INSET_RATIO)
        self.panel.setGeometry(inset_x, inset_y, max(1, width - 2 * inset_x), max(1, height - 2 * inset_y))

    # Qt events -------------------------------------------------------------

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        try:
            painter.fillRect(self.rect(), BACKGROUND_COLOR)
            if not self._text or self._font_size_px <= 0:
                return
            font = QFont(self._font_family) if self._font_family else QFont(self.font())
            font.setPixelSize(self._font_size_px)
            painter.setFont(font)
            painter.setPen(_to_qcolor(self._color))
            width, height = float(self.width()), float(self.height())
            painter.translate(width / 2.0, height / 2.0)
            painter.scale(float(self._horizontal_scale), 1.0)
            painter.drawText(
                QRectF(-width / 2.0, -height / 2.0, width, height),
                Qt.AlignmentFlag.AlignCenter,
                self._text,
            )
        finally:
            painter.end()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._layout_children()
        if self._monitor is not None:
            size = event.size()
            self._monitor.update(size.width(), size.height())

    def showEvent(self, event) -> None:  # type: ignore[override]
        super().showEvent(event)
        self._layout_children()
        if not self._poll_timer.isActive():
            self._poll_timer.start()

    def hideEvent(self, event) -> None:  # type: ignore[override]
        self._poll_timer.stop()
        super().hideEvent(event)

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        key = event.key()
        controller = self._controller
        if key == Qt.Key.Key_F11:
            if self.isFullScreen():
                self.showNormal()
            else:
                self.showFullScreen()
            event.accept()
            return
        if controller is not None and controller.is_open:
            if key == Qt.Key.Key_Escape:
                controller.cancel()
                event.accept()
                return
            if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
                controller.confirm()
                event.accept()
                return
        super().keyPressEvent(event)


def build_overlay(initial: InitialDisplaySettings) -> OverlayWindow:
    """Wire controller, viewport monitor and presenter around a new window."""
    window = OverlayWindow(font_family=initial.font_family)
    config = initial.to_display_config()
    controller = SettingsController(
        config,
        set_panel_visible_fn=window.set_panel_visible,
        log_fn=_CLIENT_LOGGER.debug,
    )
    monitor = ViewportMonitor(log_fn=_CLIENT_LOGGER.debug)
    presenter = DisplayPresenter(
        render_fn=window.render_overlay,
        initial_config=config,
        log_fn=_CLIENT_LOGGER.debug,
    )
    presenter.bind(controller, monitor)
    window.attach(controller, monitor, presenter)
    return window
