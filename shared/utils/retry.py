import random
import time
from typing import Callable, Iterable, Optional, TypeVar

T = TypeVar("T")


def retry(
    func: Callable[[], T],
    retries: int = 5,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    jitter: float = 0.1,
    retry_on: Iterable[type[BaseException]] = (Exception,),
    on_retry: Optional[Callable[[int, BaseException, float], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``func`` until it succeeds, backing off exponentially with jitter.

    Only exceptions in ``retry_on`` are retried; the last one is re-raised once
    ``retries`` attempts are exhausted.
    """
    retry_on = tuple(retry_on)
    delay = base_delay
    for attempt in range(retries):
        try:
            return func()
        except retry_on as exc:  # type: ignore[misc]
            if attempt == retries - 1:
                raise
            sleep_for = min(delay, max_delay) + random.uniform(0, delay * jitter)
            if on_retry:
                on_retry(attempt + 1, exc, sleep_for)
            sleep(sleep_for)
            delay = min(delay * 2, max_delay)
    # Unreachable
    raise RuntimeError("retry exhausted")
