from __future__ import annotations

from functools import partial
from typing import Iterable, List, Optional, Union

from minutebits.core.config import Settings, settings
from minutebits.core.logger import get_logger
from minutebits.domain.bitset import BitSet, SetAlgebra
from minutebits.domain.cache import OperationsCache
from minutebits.domain.keys import KeyCodec
from minutebits.domain.models import FailurePolicy, Granularity
from minutebits.domain.store import BitStore
from minutebits.exceptions import InvalidGranularity, StoreUnavailable
from minutebits.infrastructure.redis.client import RedisBitStore
from minutebits.metrics.bucketing import Timestamp, to_utc
from minutebits.metrics.instruments import TRACK_FAILURES_SILENCED, TRACKED_IDS

from shared.constants import RedisKeys

logger = get_logger("minutebits.tracker")

Identifiers = Union[int, Iterable[int]]


class EventTracker:
    """Records which identifiers triggered an event, bucketed by time.

    Every ``track`` call sets one bit per identifier in the bitmap of each
    configured granularity. Queries go through the granularity accessors
    (``tracker.week("login")``), which only exist for configured spans, and
    return ``BitSet`` handles that combine with ``&``, ``|``, ``^``, ``~``
    and ``-``.
    """

    def __init__(
        self,
        store: BitStore,
        time_spans: Iterable[Union[str, Granularity]] = tuple(Granularity),
        failure_policy: FailurePolicy = FailurePolicy.RAISE,
        namespace: str = RedisKeys.DEFAULT_NAMESPACE,
        use_cache: bool = True,
        max_identifier: int = 2**32 - 1,
        cache: Optional[OperationsCache] = None,
    ):
        self.store = store
        self.time_spans = Granularity.ordered(time_spans)
        self.failure_policy = FailurePolicy(failure_policy)
        self.codec = KeyCodec(namespace)
        self.operations_cache = cache if cache is not None else OperationsCache()
        self.algebra = SetAlgebra(
            store,
            self.codec,
            self.operations_cache,
            use_cache=use_cache,
            max_identifier=max_identifier,
        )

    @classmethod
    def from_settings(
        cls, config: Settings = settings, store: Optional[BitStore] = None
    ) -> "EventTracker":
        if store is None:
            store = RedisBitStore.from_url(
                config.redis_url,
                socket_timeout=config.redis_socket_timeout_seconds,
                socket_connect_timeout=config.redis_socket_timeout_seconds,
            )
        return cls(
            store,
            time_spans=config.time_spans,
            failure_policy=(
                FailurePolicy.SILENT if config.silent else FailurePolicy.RAISE
            ),
            namespace=config.key_namespace,
            use_cache=config.use_operations_cache,
            max_identifier=config.max_identifier,
        )

    @property
    def use_cache(self) -> bool:
        return self.algebra.use_cache

    @use_cache.setter
    def use_cache(self, value: bool) -> None:
        self.algebra.use_cache = value

    # ===== Tracking =====
    def track(
        self, event: str, ids: Identifiers, timestamp: Optional[Timestamp] = None
    ) -> int:
        """Mark ``ids`` as having triggered ``event`` at ``timestamp``.

        Returns the number of identifiers written, 0 when the write was
        dropped under the silent failure policy.
        """
        identifiers = [ids] if isinstance(ids, int) else list(ids)
        positions = [self.algebra.position(i) for i in identifiers]
        if not positions:
            return 0
        moment = to_utc(timestamp)
        keys = [self.codec.base_key(event, g, moment) for g in self.time_spans]
        try:
            self.store.set_bits(keys, positions)
        except StoreUnavailable as e:
            if self.failure_policy is not FailurePolicy.SILENT:
                raise
            TRACK_FAILURES_SILENCED.inc()
            logger.warning(
                "track_dropped",
                extra={"event": event, "ids": len(positions), "error": str(e)},
            )
            return 0
        TRACKED_IDS.inc(len(positions))
        logger.debug(
            "tracked",
            extra={"event": event, "ids": len(positions), "buckets": len(keys)},
        )
        return len(positions)

    # ===== Queries =====
    def query(
        self,
        granularity: Union[str, Granularity],
        event: str,
        timestamp: Optional[Timestamp] = None,
    ) -> BitSet:
        span = Granularity.parse(granularity)
        if span not in self.time_spans:
            raise InvalidGranularity(span.value, [g.value for g in self.time_spans])
        return self.algebra.bitset(self.codec.base_key(event, span, timestamp))

    def __getattr__(self, name: str):
        # Accessors such as tracker.week(...) exist only for configured spans
        if name in Granularity._value2member_map_:
            span = Granularity(name)
            if span in self.__dict__.get("time_spans", ()):
                return partial(self.query, span)
            raise InvalidGranularity(
                name, [g.value for g in self.__dict__.get("time_spans", ())]
            )
        raise AttributeError(
            f"{type(self).__name__!r} object has no attribute {name!r}"
        )

    def __dir__(self) -> List[str]:
        return sorted(set(super().__dir__()) | {g.value for g in self.time_spans})

    # ===== Inspection =====
    def events(self) -> List[str]:
        """Distinct names of every event with at least one tracked bucket."""
        names = set()
        for key in self.store.list_keys(self.codec.events_pattern):
            event = self.codec.event_from_key(key)
            if event is not None:
                names.add(event)
        return sorted(names)

    def operations(self) -> List[str]:
        """Derived keys currently held by the operations cache."""
        return self.operations_cache.keys()

    # ===== Reset =====
    def reset_operations_cache(self) -> int:
        """Forget every memoised combination and delete the derived keys.

        BitSet handles obtained from earlier combinations point at the deleted
        keys and read as empty afterwards; combine the operands again to get
        a live set.
        """
        derived = self.operations_cache.clear()
        self.store.delete_keys(derived)
        logger.info("operations_cache_reset", extra={"derived_keys": len(derived)})
        return len(derived)

    def reset_all(self) -> int:
        """Delete every key in the namespace, base and derived."""
        keys = sorted(
            k
            for k in self.store.list_keys(self.codec.namespace_pattern)
            if self.codec.owns(k)
        )
        self.operations_cache.clear()
        self.store.delete_keys(keys)
        logger.info("reset_all", extra={"deleted_keys": len(keys)})
        return len(keys)
