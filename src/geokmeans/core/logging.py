"""
Logging configuration.

We use a YAML logging config (`src/geokmeans/config/logging.yaml`) and then apply
runtime overrides from settings (e.g., `GEOKMEANS_LOG_LEVEL`).

Library code only creates module loggers; applications call `configure_logging()`.
"""

from __future__ import annotations

import copy
import logging.config

from geokmeans.config.settings import Settings, get_logging_config, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure the Python logging system based on packaged YAML config + settings."""
    settings = settings or get_settings()
    config = copy.deepcopy(get_logging_config())

    level = settings.app.log_level.upper()
    config.setdefault("root", {})["level"] = level
    for handler in config.get("handlers", {}).values():
        if isinstance(handler, dict) and "level" in handler:
            handler["level"] = level
    for logger_cfg in config.get("loggers", {}).values():
        if isinstance(logger_cfg, dict):
            logger_cfg["level"] = level

    logging.config.dictConfig(config)
