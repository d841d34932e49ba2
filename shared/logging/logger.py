"""Logger lookup and the process-wide "logging is configured" flag.

Library code only ever asks for named loggers; installing handlers is left to
whoever owns the process, through ``shared.logging.json.configure_logging``.
"""

from __future__ import annotations

import logging

_configured = False


def get_logger(name: str) -> logging.Logger:
    """Named logger that propagates to the root handler."""
    logger = logging.getLogger(name)
    logger.propagate = True
    return logger


def is_configured() -> bool:
    """Whether the JSON handler has been installed in this process."""
    return _configured


def mark_configured():
    global _configured
    _configured = True
