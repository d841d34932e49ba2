import pytest
from fastapi.testclient import TestClient
from helpers.clock import LAST_WEEK, NOW
from minutebits.main import app
from minutebits.services.tracker import EventTracker


@pytest.fixture
def client(populated):
    app.state.tracker = populated
    app.state.ready = True
    yield TestClient(app)
    app.state.ready = False


def week_ref(at):
    return {"event": "login", "granularity": "week", "at": at.isoformat()}


def test_track(client, populated):
    resp = client.post(
        "/track",
        json={"event": "signup", "ids": [1, 2], "timestamp": NOW.isoformat()},
    )
    assert resp.status_code == 202
    assert resp.json() == {"status": "accepted", "tracked": 2}
    assert populated.day("signup", NOW).contains_all([1, 2]) == [True, True]


def test_track_single_id(client, populated):
    resp = client.post("/track", json={"event": "signup", "ids": 7})
    assert resp.status_code == 202
    assert 7 in populated.day("signup")


def test_track_invalid_identifier(client):
    resp = client.post("/track", json={"event": "signup", "ids": [-3]})
    assert resp.status_code == 422


@pytest.mark.parametrize("ids", [True, [1, True], ["7"], 1.5])
def test_track_rejects_non_integer_ids(client, populated, ids):
    resp = client.post("/track", json={"event": "signup", "ids": ids})
    assert resp.status_code == 422
    assert populated.events() == ["login", "login:successful"]


def test_list_events(client):
    resp = client.get("/events")
    assert resp.json() == {"events": ["login", "login:successful"]}


def test_event_summary(client, populated):
    resp = client.get("/events/week/login", params={"at": NOW.isoformat()})
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 3
    assert body["key"] == populated.week("login", NOW).key


def test_event_summary_unconfigured_granularity(client, store):
    app.state.tracker = EventTracker(store, time_spans=["day"])
    resp = client.get("/events/week/login")
    assert resp.status_code == 400


def test_event_summary_unknown_granularity(client):
    assert client.get("/events/fortnight/login").status_code == 422


def test_event_members(client):
    resp = client.post(
        "/events/week/login/members",
        params={"at": NOW.isoformat()},
        json={"ids": [2, 12, 43]},
    )
    assert resp.json() == {"members": [2, 12]}


def test_query(client):
    resp = client.post(
        "/query",
        json={
            "expression": {
                "op": "and",
                "operands": [week_ref(NOW), week_ref(LAST_WEEK)],
            },
            "ids": [2, 12],
        },
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["members"] == [2]


def test_query_bad_arity(client):
    resp = client.post(
        "/query",
        json={"expression": {"op": "not", "operands": [week_ref(NOW)] * 2}},
    )
    assert resp.status_code == 400


def test_operations(client):
    client.post(
        "/query",
        json={"expression": {"op": "or", "operands": [week_ref(NOW)] * 2}},
    )
    assert len(client.get("/operations").json()["operations"]) == 1
    assert client.delete("/operations").json() == {"deleted": 1}
    assert client.get("/operations").json() == {"operations": []}


def test_store_unavailable(client, offline_store):
    app.state.tracker = EventTracker(offline_store)
    assert client.post("/track", json={"event": "a", "ids": 1}).status_code == 503
    assert client.get("/events").status_code == 503
    assert client.get("/healthz").status_code == 503


def test_health_ready(client):
    assert client.get("/healthz").json() == {"status": "ok", "redis": True}
    assert client.get("/readyz").status_code == 200
    app.state.ready = False
    assert client.get("/readyz").status_code == 503


def test_metrics_exposed(client):
    client.post("/track", json={"event": "signup", "ids": 1})
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "minutebits_tracked_ids_total" in resp.text
