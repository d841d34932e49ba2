"""Storage key derivation.

Base keys encode (event, granularity, bucket index); derived keys embed the
operator and the exact operand keys, each prefixed by its length, so two
different chains can never share a key and no hashing is involved.
"""

from typing import Iterable, Optional, Tuple

from minutebits.domain.models import Granularity
from minutebits.domain.operations import BitOperation
from minutebits.metrics.bucketing import Timestamp, bucket_index

from shared.constants import RedisKeys

OPERAND_SEPARATOR = ","
LENGTH_SEPARATOR = "#"


def canonical_operands(
    operator: BitOperation, operand_keys: Iterable[str]
) -> Tuple[str, ...]:
    """Order operands the way the cache and key encoding expect them.

    Commutative operators get their operands sorted so ``a & b`` and
    ``b & a`` share one entry; MINUS and NOT keep the given order.
    """
    keys = tuple(operand_keys)
    arity = operator.arity
    if arity is not None and len(keys) != arity:
        raise ValueError(
            f"{operator.value} takes {arity} operand(s), got {len(keys)}"
        )
    if not keys:
        raise ValueError(f"{operator.value} needs at least one operand")
    if operator.commutative:
        return tuple(sorted(keys))
    return keys


def encode_operands(keys: Iterable[str]) -> str:
    return OPERAND_SEPARATOR.join(f"{len(k)}{LENGTH_SEPARATOR}{k}" for k in keys)


class KeyCodec:
    def __init__(self, namespace: str = RedisKeys.DEFAULT_NAMESPACE):
        if not namespace or any(
            c in namespace for c in RedisKeys.RESERVED_NAMESPACE_CHARACTERS
        ):
            raise ValueError(f"Invalid key namespace: {namespace!r}")
        self.namespace = namespace
        self._namespace_prefix = f"{namespace}{RedisKeys.SEPARATOR}"
        self._events_prefix = (
            f"{namespace}{RedisKeys.SEPARATOR}{RedisKeys.EVENTS_SEGMENT}"
            f"{RedisKeys.SEPARATOR}"
        )

    def base_key(
        self,
        event: str,
        granularity: Granularity,
        timestamp: Optional[Timestamp] = None,
    ) -> str:
        return RedisKeys.event_key(
            self.namespace,
            event,
            granularity.value,
            bucket_index(timestamp, granularity),
        )

    def combined_key(self, operator: BitOperation, operand_keys: Iterable[str]) -> str:
        operands = canonical_operands(operator, operand_keys)
        return RedisKeys.operation_key(
            self.namespace, operator.value, encode_operands(operands)
        )

    def event_from_key(self, key: str) -> Optional[str]:
        """Event name of a base key, or None for any other key."""
        if not key.startswith(self._events_prefix):
            return None
        parts = key[len(self._events_prefix) :].rsplit(RedisKeys.SEPARATOR, 2)
        if len(parts) != 3:
            return None
        event, granularity, bucket = parts
        if granularity not in Granularity._value2member_map_:
            return None
        try:
            int(bucket)
        except ValueError:
            return None
        return event

    def owns(self, key: str) -> bool:
        """Whether ``key`` lives under this namespace."""
        return key.startswith(self._namespace_prefix)

    @property
    def events_pattern(self) -> str:
        return RedisKeys.events_pattern(self.namespace)

    @property
    def namespace_pattern(self) -> str:
        return RedisKeys.namespace_pattern(self.namespace)
