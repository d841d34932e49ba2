import pytest

from shared.utils.retry import retry


class Flaky:
    def __init__(self, failures, exc=ConnectionError):
        self.failures = failures
        self.exc = exc
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("down")
        return "ok"


def test_returns_first_success():
    sleeps = []
    func = Flaky(failures=0)

    assert retry(func, sleep=sleeps.append) == "ok"
    assert func.calls == 1
    assert sleeps == []


def test_retries_until_success_with_backoff():
    sleeps = []
    attempts = []
    func = Flaky(failures=3)

    result = retry(
        func,
        retries=5,
        base_delay=1.0,
        max_delay=3.0,
        jitter=0.0,
        retry_on=(ConnectionError,),
        on_retry=lambda attempt, exc, sleep_for: attempts.append(attempt),
        sleep=sleeps.append,
    )

    assert result == "ok"
    assert func.calls == 4
    assert attempts == [1, 2, 3]
    assert sleeps == [1.0, 2.0, 3.0]


def test_reraises_after_last_attempt():
    sleeps = []
    func = Flaky(failures=10)

    with pytest.raises(ConnectionError):
        retry(func, retries=3, jitter=0.0, sleep=sleeps.append)

    assert func.calls == 3
    assert len(sleeps) == 2


def test_other_exceptions_are_not_retried():
    func = Flaky(failures=1, exc=KeyError)

    with pytest.raises(KeyError):
        retry(func, retry_on=(ConnectionError,), sleep=lambda _: None)

    assert func.calls == 1
