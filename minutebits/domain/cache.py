from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Tuple

from minutebits.domain.keys import canonical_operands
from minutebits.domain.operations import BitOperation

CacheKey = Tuple[BitOperation, Tuple[str, ...]]


class OperationsCache:
    """Memo of combinator invocations to the store key holding their result.

    Entries are never expired one by one: the same operator applied to the
    same operand keys always denotes the same logical set, so the only
    invalidation is a full ``clear``. Clearing forgets the mapping; deleting
    the derived keys from the store is the caller's job.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, str] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(operator: BitOperation, operand_keys: Iterable[str]) -> CacheKey:
        return operator, canonical_operands(operator, operand_keys)

    def resolve(
        self, operator: BitOperation, operand_keys: Iterable[str]
    ) -> Optional[str]:
        key = self._key(operator, operand_keys)
        with self._lock:
            return self._entries.get(key)

    def record(
        self, operator: BitOperation, operand_keys: Iterable[str], derived_key: str
    ) -> None:
        key = self._key(operator, operand_keys)
        with self._lock:
            # Racing writers compute the same derived key, last one wins
            self._entries[key] = derived_key

    def clear(self) -> List[str]:
        """Drop every mapping and return the derived keys that were held."""
        with self._lock:
            derived = list(self._entries.values())
            self._entries.clear()
            return derived

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
