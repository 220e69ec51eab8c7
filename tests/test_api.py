from fastapi.testclient import TestClient

from smart_liveness.api.server import app
from conftest import make_face


client = TestClient(app)


def _points(lm):
    return [{"x": p.x, "y": p.y} for p in lm]


def test_session_lifecycle():
    r = client.post("/sessions", json={"seed": 1, "settings": {"required_blinks": 1, "consecutive_frames": 1}})
    assert r.status_code == 200
    sid = r.json()["session_id"]
    assert r.json()["status"] == "IDLE"

    r = client.post(f"/sessions/{sid}/start")
    body = r.json()
    assert body["status"] == "ACTIVE"
    assert len(body["challenges"]) == 3
    assert "BLINK" in [c["action"] for c in body["challenges"]]

    r = client.post(f"/sessions/{sid}/frames", json={"landmarks": _points(make_face(ear=0.1))})
    assert r.json()["is_blinking"] is True
    assert r.json()["last_ear"] < 0.25

    r = client.post(f"/sessions/{sid}/stop")
    assert r.json()["is_active"] is False

    r = client.post(f"/sessions/{sid}/reset")
    assert r.json()["challenges"] == []
    assert client.delete(f"/sessions/{sid}").status_code == 200
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_unknown_setting_is_rejected():
    r = client.post("/sessions", json={"settings": {"bogus": 1}})
    assert r.status_code == 422


def test_recognize():
    gallery = [{"id": "s1", "name": "Alice", "descriptor": [0.0, 0.0]}, {"id": "s2", "name": "Bob", "descriptor": [3.0, 4.0]}]
    r = client.post("/recognize", json={"descriptor": [0.1, 0.0], "gallery": gallery})
    assert r.json()["person_id"] == "s1"
    r = client.post("/recognize", json={"descriptor": [3.0, 3.0], "gallery": gallery, "threshold": 0.5})
    assert r.json()["person_id"] is None
    r = client.post("/recognize", json={"descriptor": [0.0, 0.0], "gallery": []})
    assert r.json()["person_id"] is None


def test_idle_sessions_expire():
    from smart_liveness.api import server

    sid = client.post("/sessions", json={}).json()["session_id"]
    server._last_seen[sid] -= server.cfg.api.session_ttl + 1
    client.post("/sessions", json={})
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_session_count_is_capped(monkeypatch):
    from smart_liveness.api import server

    monkeypatch.setattr(server.cfg.api, "max_sessions", 2)
    ids = [client.post("/sessions", json={}).json()["session_id"] for _ in range(3)]
    assert len(server.sessions) == 2
    assert client.get(f"/sessions/{ids[0]}").status_code == 404
    assert client.get(f"/sessions/{ids[2]}").status_code == 200
