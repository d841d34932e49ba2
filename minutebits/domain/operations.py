from enum import Enum


class BitOperation(str, Enum):
    """Operators a derived bitmap can be built with.

    AND, OR, XOR and NOT map one-to-one onto Redis ``BITOP``. MINUS is
    evaluated as ``a XOR (a AND b)`` and only exists as a cache/key tag.
    """

    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NOT = "NOT"
    MINUS = "MINUS"

    @property
    def commutative(self) -> bool:
        return self in (BitOperation.AND, BitOperation.OR, BitOperation.XOR)

    @property
    def arity(self) -> int | None:
        """Exact operand count, or None for n-ary operators."""
        if self is BitOperation.NOT:
            return 1
        if self is BitOperation.MINUS:
            return 2
        return None

    @property
    def native(self) -> bool:
        """Whether the store can evaluate this operator in a single call."""
        return self is not BitOperation.MINUS
