from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from api.session import get_session, reset_session
from config.settings import clear_settings_cache
from main import app

SQUARE = [[2.3500, 48.8500], [2.3510, 48.8500], [2.3510, 48.8510], [2.3500, 48.8510]]


@pytest.fixture(autouse=True)
def _fresh_session(monkeypatch):
    monkeypatch.delenv("GEOSCALE_CONFIG", raising=False)
    clear_settings_cache()
    reset_session()
    yield
    reset_session()


def _parse_sse(text: str) -> list[tuple[str, dict]]:
    events: list[tuple[str, dict]] = []
    for block in text.strip().split("\n\n"):
        lines = block.split("\n")
        name = lines[0].split(":", 1)[1].strip()
        data = json.loads(lines[1].split(":", 1)[1].strip())
        events.append((name, data))
    return events


def test_view_starts_at_configured_default():
    client = TestClient(app)
    data = client.get("/view").json()
    assert data["lat"] == pytest.approx(48.8566)
    assert data["lon"] == pytest.approx(2.3522)
    assert data["zoom"] == pytest.approx(15.0)
    assert data["flying"] is False


def test_set_position_and_initialize():
    client = TestClient(app)
    resp = client.post("/view/position", json={"center": {"lat": 10.0, "lon": 20.0}, "zoom": 7})
    assert resp.status_code == 200
    assert resp.json()["lat"] == pytest.approx(10.0)

    resp = client.post("/view/initialize", json={})
    assert resp.json()["lat"] == pytest.approx(48.8566)

    resp = client.post("/view/position", json={"center": {"lat": 95.0, "lon": 0.0}, "zoom": 7})
    assert resp.status_code == 422


def test_fly_streams_lifecycle_events_and_lands_on_target():
    client = TestClient(app)
    client.post("/view/initialize", json={"center": {"lat": 0.0, "lon": 0.0}, "zoom": 10})
    resp = client.post(
        "/view/fly",
        json={"center": {"lat": 48.8566, "lon": 2.3522}, "zoom": 15, "duration": 0.2},
    )
    assert resp.status_code == 200
    events = _parse_sse(resp.text)
    names = [n for n, _ in events]
    assert names[0] == "flight_started"
    assert names[-1] == "flight_completed"
    assert names[-2] == "moved"
    assert set(names[1:-1]) == {"moved"}
    assert events[-2][1] == {"lat": 48.8566, "lon": 2.3522, "zoom": 15.0}

    view = client.get("/view").json()
    assert view["flying"] is False
    assert view["zoom"] == 15.0


def test_center_on_footprint_streams_to_estimated_zoom():
    client = TestClient(app)
    resp = client.post("/view/footprint", json={"footprint": {"coordinates": SQUARE}, "duration": 0})
    events = _parse_sse(resp.text)
    assert [n for n, _ in events] == ["flight_started", "moved", "flight_completed"]
    # 0.001° * 90 km/° = 90 m -> finest zoom.
    assert events[-1][1]["zoom"] == 19.0
    assert events[-1][1]["lat"] == pytest.approx(48.8505)


def test_center_on_empty_footprint_reports_error_event():
    client = TestClient(app)
    resp = client.post("/view/footprint", json={"footprint": {"coordinates": []}})
    events = _parse_sse(resp.text)
    assert events[-1][0] == "error"


def test_center_on_address():
    client = TestClient(app)
    resp = client.post(
        "/view/address",
        json={"text": "Hotel de Ville, Paris", "lat": 48.8566, "lon": 2.3522, "duration": 0.1},
    )
    events = _parse_sse(resp.text)
    assert events[-1][0] == "flight_completed"
    assert events[-1][1]["zoom"] == 18.0


def test_highlight_returns_fan_triangulated_geometry():
    client = TestClient(app)
    resp = client.post("/highlight", json={"coordinates": SQUARE, "id": "AB12"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["fillTriangles"] == [[0, 1, 2], [0, 2, 3]]
    assert len(data["fillVertices"]) == 4
    assert len(data["outlinePoints"]) == 4
    assert all(v[1] == pytest.approx(0.01) for v in data["fillVertices"])

    plot = client.post("/plot").json()
    fills = [t for t in plot["data"] if t.get("fill") == "toself"]
    assert len(fills) == 1
    assert fills[0]["name"] == "AB12"
    assert fills[0]["lon"][0] == fills[0]["lon"][-1]
    assert plot["layout"]["meta"]["highlight"]["footprintId"] == "AB12"


def test_invalid_highlight_clears_previous_one():
    client = TestClient(app)
    assert client.post("/highlight", json={"coordinates": SQUARE}).status_code == 200
    resp = client.post("/highlight", json={"coordinates": SQUARE[:2]})
    assert resp.status_code == 422

    plot = client.post("/plot").json()
    assert not [t for t in plot["data"] if t.get("fill") == "toself"]


def test_clear_highlight_endpoint_is_idempotent():
    client = TestClient(app)
    client.post("/highlight", json={"coordinates": SQUARE})
    assert client.delete("/highlight").json() == {"cleared": True}
    assert client.delete("/highlight").json() == {"cleared": True}
    assert "highlight" not in client.post("/plot").json()["layout"]["meta"]


def test_highlight_when_engine_unavailable_is_conflict():
    client = TestClient(app)
    get_session().engine.available = False
    resp = client.post("/highlight", json={"coordinates": SQUARE})
    assert resp.status_code == 409
    assert "not available" in resp.json()["detail"]


def test_malformed_geojson_highlight_is_rejected_and_clears_previous():
    client = TestClient(app)
    assert client.post("/highlight", json={"coordinates": SQUARE}).status_code == 200

    resp = client.post(
        "/highlight", json={"geojson": {"type": "Polygon", "coordinates": [[1.0, 2.0, 3.0]]}}
    )
    assert resp.status_code == 422
    assert get_session().renderer.current is None


def test_malformed_geojson_footprint_flight_is_rejected():
    client = TestClient(app)
    resp = client.post(
        "/view/footprint",
        json={"footprint": {"geojson": {"type": "Feature", "geometry": "x"}}},
    )
    assert resp.status_code == 422
