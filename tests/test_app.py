import pytest
from fastapi.testclient import TestClient

from tests.conftest import FakeOpenWeather
from weatherly import app as app_module
from weatherly import config
from weatherly.app import app, get_client
from weatherly.errors import WeatherSearchFailed


@pytest.fixture
def client(fake):
    app.dependency_overrides[get_client] = lambda: fake
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_suggest(client, fake):
    resp = client.get("/suggest", params={"q": "Pa"})
    assert resp.status_code == 200
    assert resp.json() == [
        {"label": "Paris, FR", "value": "Paris,FR"},
        {"label": "Paris, Texas, US", "value": "Paris,US"},
    ]


def test_suggest_short_query_skips_upstream(client, fake):
    assert client.get("/suggest", params={"q": " P "}).json() == []
    assert fake.geocode_calls == []


def test_suggest_failure_is_empty_list(client, fake):
    fake.geocode_error = RuntimeError("down")
    resp = client.get("/suggest", params={"q": "Paris"})
    assert resp.status_code == 200
    assert resp.json() == []


def test_weather(client, fake):
    resp = client.get("/weather", params={"city": "Paris,FR"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Paris"
    assert body["theme"] == "clouds"
    assert body["card"]["temp"] == 15
    assert fake.weather_calls == ["Paris,FR"]


def test_weather_blank_city_uses_default(client, fake):
    client.get("/weather", params={"city": "  "})
    assert fake.weather_calls == [config.DEFAULT_CITY]


def test_weather_upstream_failure_is_502(client, fake):
    fake.weather_error = WeatherSearchFailed("Error 404: Not Found", 404)
    resp = client.get("/weather", params={"city": "Nowhere"})
    assert resp.status_code == 502
    assert resp.json() == {"detail": "Error 404: Not Found"}


def test_weather_missing_key_is_503():
    fake = FakeOpenWeather(api_key="")
    app.dependency_overrides[get_client] = lambda: fake
    try:
        resp = TestClient(app).get("/weather", params={"city": "Paris"})
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 503
    assert resp.json() == {"detail": "Missing API key"}
    assert fake.weather_calls == []


def test_stats_and_healthz(client, monkeypatch):
    async def fake_stats():
        return {"weather_calls": 3}

    async def fake_redis_ok():
        return False

    monkeypatch.setattr(app_module, "stats", fake_stats)
    monkeypatch.setattr(app_module, "redis_ok", fake_redis_ok)
    monkeypatch.setattr(config, "OPENWEATHER_API_KEY", "k")
    assert client.get("/stats").json() == {"weather_calls": 3}
    assert client.get("/healthz").json() == {"redis_ok": False, "api_key_configured": True}


def receive_until(ws, predicate, limit=10):
    for _ in range(limit):
        msg = ws.receive_json()
        if predicate(msg):
            return msg
    raise AssertionError("expected message never arrived")


def test_widget_session(client, fake, monkeypatch):
    monkeypatch.setattr(config, "SUGGEST_DEBOUNCE_MS", 10)
    with client.websocket_connect("/ws") as ws:
        first = ws.receive_json()
        assert first["status"]["kind"] == "idle"
        assert first["suggest"]["open"] is False

        ws.send_json({"type": "input", "text": "Pa"})
        snap = receive_until(ws, lambda m: m.get("suggest", {}).get("open"))
        assert [s["value"] for s in snap["suggest"]["items"]] == ["Paris,FR", "Paris,US"]

        ws.send_json({"type": "key", "key": "ArrowDown"})
        assert ws.receive_json()["suggest"]["highlight_index"] == 0
        assert ws.receive_json() == {"suppress_default": True}

        ws.send_json({"type": "key", "key": "Enter"})
        done = receive_until(ws, lambda m: m.get("status", {}).get("kind") == "ready")
        assert done["status"]["result"]["name"] == "Paris"
        assert done["theme"] == "clouds"
    assert fake.weather_calls == ["Paris,FR"]


def test_widget_session_rejects_bad_event(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_json({"type": "scroll"})
        assert ws.receive_json()["error"] == "bad_event"


@pytest.mark.parametrize("frame", ["{not json", b"\xff\x00", ""])
def test_widget_session_survives_malformed_frames(client, fake, frame):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        if isinstance(frame, bytes):
            ws.send_bytes(frame)
        else:
            ws.send_text(frame)
        assert ws.receive_json()["error"] == "bad_event"

        ws.send_json({"type": "search", "text": "Lyon"})
        done = receive_until(ws, lambda m: m.get("status", {}).get("kind") == "ready")
        assert done["status"]["result"]["name"] == "Lyon"
    assert fake.weather_calls == ["Lyon"]
