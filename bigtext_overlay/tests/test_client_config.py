from __future__ import annotations

import json
from pathlib import Path

from bigtext_overlay.client_config import (
    DEFAULT_TEXT,
    SETTINGS_ENV_VAR,
    SETTINGS_FILENAME,
    InitialDisplaySettings,
    load_initial_settings,
    resolve_settings_path,
)
from bigtext_overlay.display_config import RGBA, WHITE


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_missing_file_returns_defaults(tmp_path):
    settings = load_initial_settings(tmp_path / "missing.json")
    assert settings == InitialDisplaySettings()
    assert settings.text == DEFAULT_TEXT
    assert settings.color == WHITE


def test_invalid_json_returns_defaults(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_initial_settings(path) == InitialDisplaySettings()
    assert load_initial_settings(_write(tmp_path / "list.json", [1, 2])) == InitialDisplaySettings()


def test_values_are_loaded_and_coerced(tmp_path):
    path = _write(
        tmp_path / SETTINGS_FILENAME,
        {
            "text": "Hello",
            "color": "#00ff00",
            "font_size_ratio": 0.3,
            "font_family": "  Source Sans 3 ",
            "log_retention": 50,
            "start_fullscreen": True,
        },
    )
    settings = load_initial_settings(path)
    assert settings.text == "Hello"
    assert settings.color == RGBA(0, 255, 0)
    assert settings.font_size_ratio == 0.3
    assert settings.font_family == "Source Sans 3"
    assert settings.log_retention == 20
    assert settings.start_fullscreen is True


def test_out_of_range_ratio_is_clamped_at_load(tmp_path):
    assert load_initial_settings(_write(tmp_path / "a.json", {"font_size_ratio": 5})).font_size_ratio == 0.9
    assert load_initial_settings(_write(tmp_path / "b.json", {"font_size_ratio": -1})).font_size_ratio == 0.1
    assert load_initial_settings(_write(tmp_path / "c.json", {"font_size_ratio": "x"})).font_size_ratio == 0.5


def test_invalid_color_and_family_fall_back(tmp_path):
    settings = load_initial_settings(_write(tmp_path / "s.json", {"color": "purple-ish", "font_family": 12}))
    assert settings.color == WHITE
    assert settings.font_family is None


def test_to_display_config_seeds_unmirrored_config():
    config = InitialDisplaySettings(text="seed", color=RGBA(1, 2, 3), font_size_ratio=2.0).to_display_config()
    assert config.text == "seed"
    assert config.color == RGBA(1, 2, 3)
    assert config.font_size_ratio == 0.9
    assert config.mirrored is False


def test_resolve_settings_path_precedence(tmp_path, monkeypatch):
    package_dir = tmp_path / "pkg"
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)
    assert resolve_settings_path(None, package_dir=package_dir) == (tmp_path / SETTINGS_FILENAME).resolve()

    env_path = tmp_path / "env.json"
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(env_path))
    assert resolve_settings_path(None, package_dir=package_dir) == env_path.resolve()

    cli_path = tmp_path / "cli.json"
    assert resolve_settings_path(str(cli_path), package_dir=package_dir) == cli_path.resolve()
