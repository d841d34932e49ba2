from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional, Sequence, Set

import redis
from minutebits.core.config import settings
from minutebits.core.logger import get_logger
from minutebits.domain.operations import BitOperation
from minutebits.exceptions import StoreUnavailable

from .constants import DELETE_BATCH_SIZE, SCAN_COUNT

logger = get_logger("minutebits.redis")


@contextmanager
def _translate_errors(command: str) -> Iterator[None]:
    try:
        yield
    except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
        logger.warning(
            "redis_unavailable",
            extra={"command": command, "error_type": type(e).__name__},
        )
        raise StoreUnavailable(f"Redis unavailable during {command}: {e}") from e


class RedisBitStore:
    """Bitmap store backed by Redis SETBIT/GETBIT/BITOP/BITCOUNT."""

    def __init__(self, client: Optional[redis.Redis] = None):
        self._client = client or redis.Redis.from_url(
            settings.redis_url,
            decode_responses=True,
            socket_timeout=settings.redis_socket_timeout_seconds,
            socket_connect_timeout=settings.redis_socket_timeout_seconds,
        )

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisBitStore":
        kwargs.setdefault("decode_responses", True)
        return cls(redis.Redis.from_url(url, **kwargs))

    # ===== Writes =====
    def set_bit(self, key: str, position: int, value: bool = True) -> None:
        with _translate_errors("SETBIT"):
            self._client.setbit(key, position, int(value))

    def set_bits(self, keys: Sequence[str], positions: Sequence[int]) -> None:
        if not keys or not positions:
            return
        with _translate_errors("SETBIT"):
            pipe = self._client.pipeline(transaction=False)
            for key in keys:
                for position in positions:
                    pipe.setbit(key, position, 1)
            pipe.execute()

    # ===== Reads =====
    def get_bit(self, key: str, position: int) -> bool:
        with _translate_errors("GETBIT"):
            return bool(self._client.getbit(key, position))

    def get_bits(self, key: str, positions: Sequence[int]) -> List[bool]:
        if not positions:
            return []
        with _translate_errors("GETBIT"):
            pipe = self._client.pipeline(transaction=False)
            for position in positions:
                pipe.getbit(key, position)
            return [bool(bit) for bit in pipe.execute()]

    def bit_count(self, key: str) -> int:
        with _translate_errors("BITCOUNT"):
            return int(self._client.bitcount(key))

    # ===== Set algebra =====
    def combine(
        self, operator: BitOperation, result_key: str, operand_keys: Sequence[str]
    ) -> str:
        if not operator.native:
            raise ValueError(f"{operator.value} has no single BITOP equivalent")
        if operator is BitOperation.NOT and len(operand_keys) != 1:
            raise ValueError("NOT takes exactly one operand")
        with _translate_errors("BITOP"):
            self._client.bitop(operator.value, result_key, *operand_keys)
        logger.debug(
            "redis_bitop",
            extra={
                "operator": operator.value,
                "result_key": result_key,
                "operands": len(operand_keys),
            },
        )
        return result_key

    # ===== Key management =====
    def list_keys(self, pattern: str) -> Set[str]:
        with _translate_errors("SCAN"):
            return set(self._client.scan_iter(match=pattern, count=SCAN_COUNT))

    def delete_keys(self, keys: Iterable[str]) -> None:
        batch = list(keys)
        with _translate_errors("DEL"):
            for i in range(0, len(batch), DELETE_BATCH_SIZE):
                self._client.delete(*batch[i : i + DELETE_BATCH_SIZE])

    def ping(self) -> bool:
        with _translate_errors("PING"):
            return bool(self._client.ping())
