"""Store-backed sets and the plain identifier lists they can collapse into.

Combining a ``BitSet`` with another ``BitSet`` stays in the store and yields a
new ``BitSet``. Combining it with a literal collection of identifiers never
writes to the store: each literal is checked with GETBIT and the survivors come
back as an ``IdentifierList``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Callable, List, Optional, Union

from minutebits.core.logger import get_logger
from minutebits.domain.cache import OperationsCache
from minutebits.domain.keys import KeyCodec, canonical_operands
from minutebits.domain.models import identifier_to_position
from minutebits.domain.operations import BitOperation
from minutebits.domain.store import BitStore
from minutebits.metrics.instruments import OPERATIONS_CACHE_LOOKUPS, STORE_COMBINES

logger = get_logger("minutebits.bitset")


class SetAlgebra:
    """Evaluates combinators against a store, memoising derived keys."""

    def __init__(
        self,
        store: BitStore,
        codec: KeyCodec,
        cache: OperationsCache,
        use_cache: bool = True,
        max_identifier: int = 2**32 - 1,
    ):
        self.store = store
        self.codec = codec
        self.cache = cache
        self.use_cache = use_cache
        self.max_identifier = max_identifier

    def bitset(self, key: str) -> "BitSet":
        return BitSet(key, self)

    def position(self, identifier: int) -> int:
        return identifier_to_position(identifier, self.max_identifier)

    def combine(self, operator: BitOperation, operand_keys: Sequence[str]) -> str:
        """Key holding ``operator`` applied to ``operand_keys``.

        A cache hit returns the recorded key without touching the store; a
        miss always issues a fresh BITOP, even if a key of that name already
        exists from an earlier process.
        """
        operands = canonical_operands(operator, operand_keys)
        if self.use_cache:
            cached = self.cache.resolve(operator, operands)
            if cached is not None:
                OPERATIONS_CACHE_LOOKUPS.labels(result="hit").inc()
                logger.debug(
                    "operations_cache_hit",
                    extra={"operator": operator.value, "derived_key": cached},
                )
                return cached
            OPERATIONS_CACHE_LOOKUPS.labels(result="miss").inc()

        derived = self.codec.combined_key(operator, operands)
        if operator is BitOperation.MINUS:
            # a - b == a ^ (a & b), correct whatever the bitmap lengths
            minuend, subtrahend = operands
            common = self.combine(BitOperation.AND, (minuend, subtrahend))
            self.store.combine(BitOperation.XOR, derived, (minuend, common))
            STORE_COMBINES.labels(operator=BitOperation.XOR.value).inc()
        else:
            self.store.combine(operator, derived, operands)
            STORE_COMBINES.labels(operator=operator.value).inc()

        if self.use_cache:
            self.cache.record(operator, operands, derived)
        return derived


class BitSet:
    """Handle to a bitmap in the store, base or derived.

    Handles are cheap values: they hold a key and the algebra used to combine
    them, never any bits.
    """

    def __init__(self, key: str, algebra: SetAlgebra):
        self.key = key
        self._algebra = algebra

    def __repr__(self) -> str:
        return f"BitSet({self.key!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    # Membership
    def contains(self, identifier: int) -> bool:
        position = self._algebra.position(identifier)
        return self._algebra.store.get_bit(self.key, position)

    def contains_all(self, identifiers: Iterable[int]) -> List[bool]:
        positions = [self._algebra.position(i) for i in identifiers]
        return self._algebra.store.get_bits(self.key, positions)

    def __contains__(self, identifier: int) -> bool:
        return self.contains(identifier)

    def length(self) -> int:
        """Number of identifiers in the set, read from the store each call."""
        return self._algebra.store.bit_count(self.key)

    __len__ = length

    # Combinators
    def and_(self, other: Union["BitSet", Iterable[int]]) -> "Result":
        if isinstance(other, BitSet):
            return self._combine(BitOperation.AND, other)
        return self._filter(other, keep_members=True)

    def or_(self, other: "BitSet") -> "BitSet":
        return self._combine(BitOperation.OR, self._require_bitset(other, "|"))

    def xor(self, other: "BitSet") -> "BitSet":
        return self._combine(BitOperation.XOR, self._require_bitset(other, "^"))

    def not_(self) -> "BitSet":
        key = self._algebra.combine(BitOperation.NOT, (self.key,))
        return self._algebra.bitset(key)

    def subtract(self, other: Union["BitSet", Iterable[int]]) -> "Result":
        if isinstance(other, BitSet):
            return self._combine(BitOperation.MINUS, other)
        return self._filter(other, keep_members=False)

    def __and__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.and_(other)

    def __rand__(self, other):
        if isinstance(other, BitSet) or not _is_operand(other):
            return NotImplemented
        return self._filter(other, keep_members=True)

    def __or__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.or_(other)

    __add__ = __or__

    def __xor__(self, other):
        if not isinstance(other, BitSet):
            return NotImplemented
        return self.xor(other)

    def __invert__(self) -> "BitSet":
        return self.not_()

    def __sub__(self, other):
        if not _is_operand(other):
            return NotImplemented
        return self.subtract(other)

    # Internals
    def _combine(self, operator: BitOperation, other: "BitSet") -> "BitSet":
        if other._algebra is not self._algebra:
            raise ValueError("Cannot combine sets from different trackers")
        key = self._algebra.combine(operator, (self.key, other.key))
        return self._algebra.bitset(key)

    def _filter(
        self, identifiers: Iterable[int], keep_members: bool
    ) -> "IdentifierList":
        candidates = list(identifiers)
        flags = self.contains_all(candidates)
        return IdentifierList(
            i for i, flag in zip(candidates, flags) if flag == keep_members
        )

    @staticmethod
    def _require_bitset(other, symbol: str) -> "BitSet":
        if not isinstance(other, BitSet):
            raise TypeError(
                f"unsupported operand for {symbol}: BitSet and {type(other).__name__}"
            )
        return other


class IdentifierList(Sequence):
    """Materialised, ordered identifiers; disconnected from the store."""

    __slots__ = ("_ids",)

    def __init__(self, identifiers: Optional[Iterable[int]] = None):
        self._ids = tuple(identifiers or ())

    def __repr__(self) -> str:
        return f"IdentifierList({list(self._ids)!r})"

    def __getitem__(self, index):
        if isinstance(index, slice):
            return IdentifierList(self._ids[index])
        return self._ids[index]

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)

    @property
    def size(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IdentifierList):
            return self._ids == other._ids
        if isinstance(other, (list, tuple)):
            return self._ids == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ids)

    def map(self, func: Callable[[int], object]) -> list:
        return [func(i) for i in self._ids]

    def filter(self, predicate: Callable[[int], bool]) -> "IdentifierList":
        return IdentifierList(i for i in self._ids if predicate(i))

    # Local set arithmetic, left operand order wins, duplicates dropped
    def __and__(self, other):
        if isinstance(other, BitSet) or not isinstance(other, Iterable):
            return NotImplemented
        right = set(other)
        return IdentifierList(_unique(i for i in self._ids if i in right))

    def __or__(self, other):
        if isinstance(other, BitSet) or not isinstance(other, Iterable):
            return NotImplemented
        return IdentifierList(_unique([*self._ids, *other]))

    def __sub__(self, other):
        if isinstance(other, BitSet) or not isinstance(other, Iterable):
            return NotImplemented
        right = set(other)
        return IdentifierList(_unique(i for i in self._ids if i not in right))


def _is_operand(other) -> bool:
    """A BitSet, or a literal collection of identifiers."""
    if isinstance(other, BitSet):
        return True
    return isinstance(other, Iterable) and not isinstance(other, (str, bytes))


def _unique(identifiers: Iterable[int]) -> List[int]:
    seen = set()
    out = []
    for i in identifiers:
        if i not in seen:
            seen.add(i)
            out.append(i)
    return out


# What a combinator hands back: a store-backed set or a materialised list
Result = Union[BitSet, IdentifierList]
