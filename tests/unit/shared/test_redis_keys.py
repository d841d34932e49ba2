from shared.constants import RedisKeys


class TestRedisKeys:
    def test_event_key(self):
        key = RedisKeys.event_key("minutebits", "login", "week", 2911)

        assert key == "minutebits:events:login:week:2911"

    def test_event_key_keeps_separators_in_event_names(self):
        key = RedisKeys.event_key("ns", "login:successful", "day", 1)

        assert key == "ns:events:login:successful:day:1"

    def test_operation_key(self):
        key = RedisKeys.operation_key("ns", "AND", "3#a:b,1#c")

        assert key == "ns:ops:AND(3#a:b,1#c)"

    def test_patterns(self):
        assert RedisKeys.events_pattern("ns") == "ns:events:*"
        assert RedisKeys.namespace_pattern("ns") == "ns:*"
