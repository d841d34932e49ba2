"""Exceptions raised by the tracker."""


class MinutebitsError(Exception):
    """Base class for every error raised by this package."""


class StoreUnavailable(MinutebitsError):
    """The bitmap store could not be reached (connection refused, timeout)."""


class InvalidIdentifier(MinutebitsError, ValueError):
    """An identifier cannot be used as a bit position."""

    def __init__(self, identifier, reason: str):
        super().__init__(f"Invalid identifier {identifier!r}: {reason}")
        self.identifier = identifier
        self.reason = reason


class InvalidGranularity(MinutebitsError, AttributeError):
    """A query asked for a granularity the tracker was not configured with.

    Subclassing AttributeError keeps ``hasattr(tracker, "minute")`` False when
    minutes are not tracked.
    """

    def __init__(self, granularity: str, configured):
        super().__init__(
            f"Granularity '{granularity}' is not tracked "
            f"(configured: {', '.join(configured) or 'none'})"
        )
        self.granularity = granularity
        self.configured = tuple(configured)


class InvalidExpression(MinutebitsError, ValueError):
    """A query expression has the wrong number of operands for its operator."""
