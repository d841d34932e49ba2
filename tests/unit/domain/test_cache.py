import threading

from minutebits.domain.cache import OperationsCache
from minutebits.domain.operations import BitOperation


def test_resolve_miss_then_hit():
    cache = OperationsCache()
    assert cache.resolve(BitOperation.AND, ["a", "b"]) is None
    cache.record(BitOperation.AND, ["a", "b"], "derived")
    assert cache.resolve(BitOperation.AND, ["a", "b"]) == "derived"


def test_commutative_operands_share_an_entry():
    cache = OperationsCache()
    cache.record(BitOperation.OR, ["b", "a"], "derived")
    assert cache.resolve(BitOperation.OR, ["a", "b"]) == "derived"
    assert len(cache) == 1


def test_minus_operands_are_ordered():
    cache = OperationsCache()
    cache.record(BitOperation.MINUS, ["a", "b"], "a-b")
    assert cache.resolve(BitOperation.MINUS, ["b", "a"]) is None


def test_operator_distinguishes_entries():
    cache = OperationsCache()
    cache.record(BitOperation.AND, ["a", "b"], "and")
    assert cache.resolve(BitOperation.OR, ["a", "b"]) is None


def test_clear_returns_derived_keys():
    cache = OperationsCache()
    cache.record(BitOperation.AND, ["a", "b"], "k1")
    cache.record(BitOperation.NOT, ["a"], "k2")
    assert sorted(cache.keys()) == ["k1", "k2"]
    assert sorted(cache.clear()) == ["k1", "k2"]
    assert len(cache) == 0
    assert cache.resolve(BitOperation.AND, ["a", "b"]) is None


def test_concurrent_records_do_not_corrupt():
    cache = OperationsCache()

    def worker(n: int):
        for i in range(200):
            cache.record(BitOperation.AND, [f"k{i}", "x"], f"d{i}")
            cache.resolve(BitOperation.AND, ["x", f"k{i}"])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(cache) == 200
    assert cache.resolve(BitOperation.AND, ["k7", "x"]) == "d7"
