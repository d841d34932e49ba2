from enum import Enum
from typing import Iterable, Tuple

from minutebits.exceptions import InvalidIdentifier


class Granularity(str, Enum):
    """Time spans an event can be bucketed by, coarsest first."""

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"

    @classmethod
    def parse(cls, value: "str | Granularity") -> "Granularity":
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown granularity '{value}'. "
                f"Expected one of: {', '.join(g.value for g in cls)}"
            ) from None

    @classmethod
    def ordered(
        cls, values: Iterable["str | Granularity"]
    ) -> Tuple["Granularity", ...]:
        """Parse ``values``, dropping duplicates and keeping their order."""
        seen: list[Granularity] = []
        for value in values:
            g = cls.parse(value)
            if g not in seen:
                seen.append(g)
        return tuple(seen)


class FailurePolicy(str, Enum):
    """What ``EventTracker.track`` does when the store is unreachable."""

    RAISE = "raise"
    SILENT = "silent"  # drop the write, log it, return normally


def identifier_to_position(identifier, max_identifier: int) -> int:
    """Bit position for an identifier; identifiers map to themselves."""
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise InvalidIdentifier(identifier, "must be an integer")
    if identifier < 0:
        raise InvalidIdentifier(identifier, "must not be negative")
    if identifier > max_identifier:
        raise InvalidIdentifier(identifier, f"exceeds the maximum of {max_identifier}")
    return identifier
