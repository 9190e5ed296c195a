"""Dev-mode detection and troubleshooting knobs for the overlay client."""

from __future__ import annotations

import os
from typing import Any, Optional

DEV_MODE_ENV_VAR = "BIGTEXT_OVERLAY_DEV_MODE"
CLIENT_LOG_RETENTION_MIN = 1
CLIENT_LOG_RETENTION_MAX = 20
CLIENT_LOG_RETENTION_DEFAULT = 5


def is_dev_build(value: Optional[str] = None) -> bool:
    if value is None:
        value = os.getenv(DEV_MODE_ENV_VAR)
    if value is None:
        return False
    token = value.strip().lower()
    if token in {"1", "true", "yes", "on"}:
        return True
    return False


DEBUG_CONFIG_ENABLED = is_dev_build()


def coerce_log_retention(value: Any, fallback: int = CLIENT_LOG_RETENTION_DEFAULT) -> int:
    if value is None or isinstance(value, bool):
        return fallback
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    if numeric <= 0:
        return CLIENT_LOG_RETENTION_MIN
    if numeric > CLIENT_LOG_RETENTION_MAX:
        return CLIENT_LOG_RETENTION_MAX
    return numeric
