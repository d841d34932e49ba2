import fakeredis
import pytest
from helpers.clock import LAST_MONTH, LAST_WEEK, NOW
from minutebits.infrastructure.redis.client import RedisBitStore
from minutebits.services.tracker import EventTracker


@pytest.fixture
def redis_client():
    """In-memory Redis with string responses, like the production client."""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def store(redis_client):
    return RedisBitStore(redis_client)


@pytest.fixture
def tracker(store):
    return EventTracker(store)


@pytest.fixture
def offline_store():
    """A store whose server refuses every command."""
    server = fakeredis.FakeServer()
    server.connected = False
    return RedisBitStore(fakeredis.FakeRedis(server=server, decode_responses=True))


@pytest.fixture
def populated(tracker):
    """The login history most query tests run against.

    login:            12, 2, 42 now; 2 a week ago
    login:successful: 567 a month ago
    """
    tracker.track("login", 12, NOW)
    tracker.track("login", [2, 42], NOW)
    tracker.track("login", 2, LAST_WEEK)
    tracker.track("login:successful", 567, LAST_MONTH)
    return tracker
