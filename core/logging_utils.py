"""Monitor logging: one shared console handler, UTC timestamps, component tags."""

from __future__ import annotations

import logging
import os
import time

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"
_HANDLER_NAME = "botmonitor-root-handler"
_SILENT = logging.CRITICAL + 1

# Set while the live terminal view owns the screen
_console_suppressed = False


class TaggedLogger(logging.LoggerAdapter):
    """Prefixes every message with its component tag, e.g. ``[SYNC] Stopped``."""

    def process(self, msg, kwargs):
        return f"[{self.extra['tag']}] {msg}", kwargs


def _console_handler() -> logging.Handler | None:
    for handler in logging.getLogger().handlers:
        if handler.name == _HANDLER_NAME:
            return handler
    return None


def _resolve_level(level: str | int | None) -> int:
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def suppress_console_logging(suppress: bool = True) -> None:
    """Silence the shared console handler while the live view is drawn."""
    global _console_suppressed
    _console_suppressed = suppress

    handler = _console_handler()
    if handler is not None:
        handler.setLevel(_SILENT if suppress else logging.getLogger().level)


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """Attach the console handler once and apply ``level`` to the root logger."""
    root = logging.getLogger()
    resolved_level = _resolve_level(level)

    handler = _console_handler()
    if handler is None:
        handler = logging.StreamHandler()
        handler.name = _HANDLER_NAME
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
        formatter.converter = time.gmtime
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.setLevel(resolved_level)
    handler.setLevel(_SILENT if _console_suppressed else resolved_level)
    return root


def get_logger(name: str, tag: str | None = None) -> logging.Logger | TaggedLogger:
    """Logger for ``name``; with ``tag`` its messages read ``[TAG] ...``."""
    setup_logging()
    logger = logging.getLogger(name)
    if tag:
        return TaggedLogger(logger, {"tag": tag})
    return logger
