"""Exact unique-event tracking on Redis bitmaps.

Typical use::

    tracker = EventTracker.from_settings()
    tracker.track("login", 12)
    active = tracker.week("login") & tracker.week("signup")
    12 in active
"""

from .domain.bitset import BitSet, IdentifierList
from .domain.cache import OperationsCache
from .domain.models import FailurePolicy, Granularity
from .domain.operations import BitOperation
from .exceptions import (
    InvalidExpression,
    InvalidGranularity,
    InvalidIdentifier,
    MinutebitsError,
    StoreUnavailable,
)
from .services.tracker import EventTracker

__all__ = [
    "BitOperation",
    "BitSet",
    "EventTracker",
    "FailurePolicy",
    "Granularity",
    "IdentifierList",
    "InvalidExpression",
    "InvalidGranularity",
    "InvalidIdentifier",
    "MinutebitsError",
    "OperationsCache",
    "StoreUnavailable",
]
