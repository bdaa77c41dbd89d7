"""
relatable.logging - Logging configuration for entry points.

Library modules only call ``logging.getLogger(__name__)``. The CLI calls
configure_logging() once; repeated calls replace only the handlers this
module installed, leaving any external logging setup alone.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Mapping

_CONFIGURED_FLAG_ATTR = "_relatable_configured"
_HANDLER_TAG_ATTR = "_relatable_handler"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class LoggingConfig:
    """Logging settings.

    Attributes:
        level: "DEBUG" | "INFO" | "WARNING" | "ERROR" | "CRITICAL"
        fmt: Format for the stderr handler.
    """

    level: str = "WARNING"
    fmt: str = "%(levelname)s | %(name)s | %(message)s"

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> LoggingConfig:
        """Build from the ``[logging]`` table of a merged config."""
        section = config.get("logging", {})
        return cls(level=str(section.get("level", cls.level)))


def parse_level(level: str | None) -> int:
    """Map a level name to a logging constant, WARNING when unknown."""
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.WARNING)


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """Configure the ``relatable`` logger with a stderr handler.

    If already configured and force is False, this is a no-op.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger("relatable")
    if getattr(logger, _CONFIGURED_FLAG_ATTR, False) and not force:
        return logger

    for handler in list(logger.handlers):
        if _is_our_handler(handler):
            logger.removeHandler(handler)
            handler.close()

    level = parse_level(cfg.level)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(cfg.fmt))
    setattr(handler, _HANDLER_TAG_ATTR, True)
    logger.addHandler(handler)

    setattr(logger, _CONFIGURED_FLAG_ATTR, True)
    return logger
