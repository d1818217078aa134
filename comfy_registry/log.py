"""Logging setup for the ``comfy_registry`` logger tree.

Modules call ``get_logger(__name__)``. Loading the config applies its
``logging`` section through ``configure_logging``.
"""
from __future__ import annotations

import json
import logging
from typing import Any

ROOT_LOGGER = "comfy_registry"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: dict[str, Any] = {
            "ts": round(record.created, 3),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_logging(cfg: Any) -> logging.Logger:
    """Apply a ``LoggingConfig`` to the package root logger.

    Re-applying replaces the handler installed earlier instead of stacking
    another one.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(_LEVELS.get(cfg.level, logging.INFO))
    for h in list(logger.handlers):
        if getattr(h, "_comfy_registry", False):
            logger.removeHandler(h)
    h = logging.StreamHandler()
    h._comfy_registry = True  # type: ignore[attr-defined]
    if cfg.format == "json":
        h.setFormatter(JsonFormatter())
    else:
        h.setFormatter(
            logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        )
    logger.addHandler(h)
    return logger


__all__ = ["JsonFormatter", "configure_logging", "get_logger", "ROOT_LOGGER"]
