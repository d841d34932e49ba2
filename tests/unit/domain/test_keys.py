from datetime import datetime, timedelta, timezone

import pytest
from minutebits.domain.keys import KeyCodec, canonical_operands
from minutebits.domain.models import Granularity
from minutebits.domain.operations import BitOperation

T = datetime(2026, 10, 14, 15, 30, 12, tzinfo=timezone.utc)


@pytest.fixture
def codec():
    return KeyCodec("mb")


class TestBaseKey:
    def test_format(self, codec):
        key = codec.base_key("login", Granularity.YEAR, T)
        assert key == "mb:events:login:year:2026"

    def test_same_bucket_same_key(self, codec):
        later = T + timedelta(seconds=30)
        assert codec.base_key("login", Granularity.MINUTE, T) == codec.base_key(
            "login", Granularity.MINUTE, later
        )

    def test_distinct_inputs_distinct_keys(self, codec):
        keys = {
            codec.base_key("login", Granularity.DAY, T),
            codec.base_key("logout", Granularity.DAY, T),
            codec.base_key("login", Granularity.HOUR, T),
            codec.base_key("login", Granularity.DAY, T + timedelta(days=1)),
        }
        assert len(keys) == 4

    def test_namespace_validation(self):
        with pytest.raises(ValueError):
            KeyCodec("")
        with pytest.raises(ValueError):
            KeyCodec("a:b")
        for namespace in ("a*", "a?", "a[b]", "a\\"):
            with pytest.raises(ValueError):
                KeyCodec(namespace)


class TestCombinedKey:
    def test_and_or_are_commutative(self, codec):
        for op in (BitOperation.AND, BitOperation.OR, BitOperation.XOR):
            assert codec.combined_key(op, ["a", "b"]) == codec.combined_key(
                op, ["b", "a"]
            )

    def test_minus_keeps_order(self, codec):
        assert codec.combined_key(BitOperation.MINUS, ["a", "b"]) != codec.combined_key(
            BitOperation.MINUS, ["b", "a"]
        )

    def test_operator_is_part_of_key(self, codec):
        assert codec.combined_key(BitOperation.AND, ["a", "b"]) != codec.combined_key(
            BitOperation.OR, ["a", "b"]
        )

    def test_length_prefix_prevents_collisions(self, codec):
        # Joined naively both would read "a,b,c"
        left = codec.combined_key(BitOperation.OR, ["a,b", "c"])
        right = codec.combined_key(BitOperation.OR, ["a", "b,c"])
        assert left != right
        assert left == "mb:ops:OR(3#a,b,1#c)"

    def test_not_is_unary(self, codec):
        assert codec.combined_key(BitOperation.NOT, ["a"]) == "mb:ops:NOT(1#a)"
        with pytest.raises(ValueError):
            codec.combined_key(BitOperation.NOT, ["a", "b"])

    def test_minus_is_binary(self):
        with pytest.raises(ValueError):
            canonical_operands(BitOperation.MINUS, ["a"])

    def test_empty_operands_rejected(self):
        with pytest.raises(ValueError):
            canonical_operands(BitOperation.AND, [])

    def test_nested_keys_embed_operands(self, codec):
        inner = codec.combined_key(BitOperation.AND, ["x", "y"])
        outer = codec.combined_key(BitOperation.OR, [inner, "z"])
        assert inner in outer


class TestEventFromKey:
    def test_round_trip_with_colons(self, codec):
        key = codec.base_key("login:successful", Granularity.WEEK, T)
        assert codec.event_from_key(key) == "login:successful"

    def test_event_that_looks_like_a_suffix(self, codec):
        key = codec.base_key("odd:day:5", Granularity.HOUR, T)
        assert codec.event_from_key(key) == "odd:day:5"

    def test_other_keys(self, codec):
        assert codec.event_from_key("mb:ops:NOT(1#a)") is None
        assert codec.event_from_key("other:events:login:day:1") is None
        assert codec.event_from_key("mb:events:login:fortnight:1") is None
        assert codec.event_from_key("mb:events:login:day:x") is None

    def test_owns(self, codec):
        assert codec.owns(codec.combined_key(BitOperation.NOT, ["a"]))
        assert codec.owns(codec.base_key("a", Granularity.DAY, T))
        assert not codec.owns("mbX:events:a:day:1")
        assert not codec.owns("other:ops:NOT(1#a)")
