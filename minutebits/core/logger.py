from __future__ import annotations

import logging
from typing import Iterable

from shared.logging.json import configure_logging as _shared_configure_logging
from shared.logging.logger import get_logger as _shared_get_logger
from shared.logging.logger import is_configured

from .config import settings


class RedactingFilter(logging.Filter):
    """Blank out whole messages mentioning a sensitive pattern."""

    def __init__(self, patterns: Iterable[str]):
        super().__init__()
        self.patterns = [p.lower() for p in patterns]

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        msg = record.getMessage().lower()
        if any(p in msg for p in self.patterns):
            record.msg = "[REDACTED SENSITIVE LOG CONTENT]"
            record.args = ()
        return True


def configure_logging(force: bool = False):
    """Install the JSON handler on the root logger once per process."""
    if is_configured() and not force:
        return
    root = _shared_configure_logging(
        service=settings.otel_service_name,
        level=settings.app_log_level,
        environment=settings.app_environment,
        redaction_patterns=settings.app_log_redaction_patterns,
    )
    # Attach redaction filter at root so it applies to all handlers
    for h in root.handlers:
        h.addFilter(RedactingFilter(settings.app_log_redaction_patterns))


def get_logger(name: str) -> logging.Logger:
    return _shared_get_logger(name)
