from typing import Iterable, List, Protocol, Sequence, Set

from minutebits.domain.operations import BitOperation


class BitStore(Protocol):
    """Bit-addressable key/value store the tracker reads and writes.

    Mirrors Redis SETBIT/GETBIT/BITOP/BITCOUNT. Implementations raise
    ``StoreUnavailable`` when the store cannot be reached.
    """

    def set_bit(self, key: str, position: int, value: bool = True) -> None: ...

    def set_bits(self, keys: Sequence[str], positions: Sequence[int]) -> None:
        """Set every position in every key in one round trip."""
        ...

    def get_bit(self, key: str, position: int) -> bool: ...

    def get_bits(self, key: str, positions: Sequence[int]) -> List[bool]: ...

    def combine(
        self, operator: BitOperation, result_key: str, operand_keys: Sequence[str]
    ) -> str: ...

    def bit_count(self, key: str) -> int: ...

    def list_keys(self, pattern: str) -> Set[str]: ...

    def delete_keys(self, keys: Iterable[str]) -> None: ...

    def ping(self) -> bool: ...
