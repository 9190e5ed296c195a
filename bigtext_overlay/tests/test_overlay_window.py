from __future__ import annotations

import os

import pytest

pytestmark = pytest.mark.pyqt_required


@pytest.fixture
def qt_app(monkeypatch):
    monkeypatch.setenv("QT_QPA_PLATFORM", os.getenv("QT_QPA_PLATFORM", "offscreen"))
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def window(qt_app):
    from bigtext_overlay.client_config import InitialDisplaySettings
    from bigtext_overlay.display_config import RGBA
    from bigtext_overlay.overlay_window import build_overlay

    win = build_overlay(InitialDisplaySettings(text="Overlay", color=RGBA(255, 255, 0), font_size_ratio=0.5))
    win.resize(400, 800)
    win.show()
    qt_app.processEvents()
    # Offscreen platforms may defer resize events; drive the monitor directly.
    win._monitor.update(400, 800)
    yield win
    win.close()


def test_initial_render_uses_committed_config(window):
    from bigtext_overlay.display_config import RGBA

    assert window.draw_state == ("Overlay", RGBA(255, 255, 0), 400, 1)
    assert window.panel.isHidden()


def test_settings_button_opens_panel_populated_from_draft(window):
    window.settings_button.click()
    assert window.controller.is_open
    assert not window.panel.isHidden()
    assert window.panel.text_input.text() == "Overlay"
    assert window.panel.size_slider.value() == 50
    assert window.panel.size_label.text() == "Font size: 50%"
    assert window.panel.mirror_checkbox.isChecked() is False


def test_panel_edits_apply_only_on_confirm(window):
    window.settings_button.click()
    window.panel.text_input.setText("Changed")
    window.panel.size_slider.setValue(25)
    window.panel.mirror_checkbox.setChecked(True)

    assert window.draw_state[0] == "Overlay"
    assert window.controller.config.text == "Overlay"

    window.panel.confirm_button.click()

    assert window.panel.isHidden()
    text, _color, size, scale = window.draw_state
    assert (text, size, scale) == ("Changed", 200, -1)


def test_cancel_button_discards_edits(window):
    from bigtext_overlay.display_config import RGBA

    window.settings_button.click()
    window.panel.text_input.setText("Nope")
    window.panel.apply_color(RGBA(0, 0, 255))
    window.panel.cancel_button.click()

    assert window.panel.isHidden()
    assert window.controller.config.text == "Overlay"
    assert window.draw_state[0] == "Overlay"


def test_settings_button_toggles_closed_without_applying(window):
    window.settings_button.click()
    window.panel.text_input.setText("Toggle")
    window.settings_button.click()
    assert not window.controller.is_open
    assert window.controller.config.text == "Overlay"


def test_escape_and_enter_keys_drive_transaction(window):
    from PyQt6.QtCore import Qt
    from PyQt6.QtTest import QTest

    window.settings_button.click()
    window.panel.text_input.setText("Escaped")
    QTest.keyClick(window, Qt.Key.Key_Escape)
    assert not window.controller.is_open
    assert window.controller.config.text == "Overlay"

    window.settings_button.click()
    window.panel.text_input.setText("Entered")
    QTest.keyClick(window, Qt.Key.Key_Return)
    assert not window.controller.is_open
    assert window.controller.config.text == "Entered"


def test_viewport_change_relayouts(window):
    window._monitor.update(400, 1000)
    assert window.draw_state[2] == 500


def test_paint_event_handles_mirrored_and_zero_size(window):
    from bigtext_overlay.display_config import RGBA

    window.render_overlay("Mirrored", RGBA(255, 0, 0), 120, -1)
    assert window.grab().isNull() is False
    window.render_overlay("Tiny", RGBA(255, 0, 0), 0, 1)
    assert window.grab().isNull() is False
