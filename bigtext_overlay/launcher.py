from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import QApplication

from bigtext_overlay.client_config import load_initial_settings, resolve_settings_path
from bigtext_overlay.debug_config import DEBUG_CONFIG_ENABLED, DEV_MODE_ENV_VAR
from bigtext_overlay.logging_utils import build_rotating_file_handler, resolve_logs_dir
from bigtext_overlay.overlay_window import _CLIENT_LOGGER, build_overlay

PACKAGE_DIR = Path(__file__).resolve().parent


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Full-screen big text overlay")
    parser.add_argument("--settings", help="Path to bigtext_settings.json")
    parser.add_argument("--fullscreen", action="store_true", help="Start in full-screen mode")
    parser.add_argument("--log-dir", help="Directory for rotating log files")
    return parser


def attach_file_logging(log_dir: Path, *, retention: int) -> logging.Handler:
    handler = build_rotating_file_handler(log_dir, retention=retention)
    _CLIENT_LOGGER.addHandler(handler)
    if not DEBUG_CONFIG_ENABLED:
        _CLIENT_LOGGER.info("Verbose logging disabled. Export %s=1 to enable debug output.", DEV_MODE_ENV_VAR)
    return handler


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings_path = resolve_settings_path(args.settings, package_dir=PACKAGE_DIR)
    initial_settings = load_initial_settings(settings_path)

    log_dir = Path(args.log_dir).expanduser() if args.log_dir else resolve_logs_dir(PACKAGE_DIR.parent)
    attach_file_logging(log_dir, retention=initial_settings.log_retention)

    _CLIENT_LOGGER.info("Starting BigText overlay (pid=%s)", os.getpid())
    _CLIENT_LOGGER.debug(
        "Loaded initial settings from %s: ratio=%.2f color=%s font_family=%s retention=%d",
        settings_path,
        initial_settings.font_size_ratio,
        initial_settings.color.hex(),
        initial_settings.font_family or "default",
        initial_settings.log_retention,
    )

    app = QApplication(sys.argv)
    window = build_overlay(initial_settings)
    if args.fullscreen or initial_settings.start_fullscreen:
        window.showFullScreen()
    else:
        window.show()
    _CLIENT_LOGGER.debug("Overlay window shown; size=%dx%d", window.width(), window.height())

    exit_code = app.exec()
    _CLIENT_LOGGER.info("Overlay exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
