from __future__ import annotations

import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    log_level: int = logging.INFO
    # Longest side of the interactive preview buffer; export always uses full resolution.
    preview_max_side: int = 1600
    render_debounce_ms: int = 25
    zoom_min: int = 25
    zoom_max: int = 200
    zoom_step: int = 25
    curve_canvas_size: int = 200
    curve_padding: int = 20
    export_subject: str = "underwater-photo"
    settings_org: str = "UWCC"
    settings_app: str = "Underwater Color Correct"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    raw = raw.strip()
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def load_config() -> AppConfig:
    defaults = AppConfig()
    return AppConfig(
        log_level=_env_log_level("UWCC_LOG_LEVEL", defaults.log_level),
        preview_max_side=max(64, _env_int("UWCC_PREVIEW_MAX_SIDE", defaults.preview_max_side)),
        render_debounce_ms=max(0, _env_int("UWCC_RENDER_DEBOUNCE_MS", defaults.render_debounce_ms)),
    )


APP_CONFIG = load_config()
