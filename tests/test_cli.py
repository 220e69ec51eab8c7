import json

import yaml
from typer.testing import CliRunner

from smart_liveness.cli import app
from conftest import make_face


runner = CliRunner()


def _frame(ear=0.3, ratio=0.5):
    return {"landmarks": [[p.x, p.y] for p in make_face(ear=ear, ratio=ratio)], "descriptor": [0.0, 0.0], "score": 1.0}


def test_match(tmp_path):
    gallery = tmp_path / "gallery.yaml"
    gallery.write_text(yaml.safe_dump({"gallery": [{"id": "s1", "name": "Alice", "descriptor": [0.0, 0.1]}]}), encoding="utf-8")
    probe = tmp_path / "probe.json"
    probe.write_text(json.dumps([0.0, 0.0]), encoding="utf-8")
    res = runner.invoke(app, ["match", str(gallery), str(probe)])
    assert res.exit_code == 0
    assert res.output.startswith("s1 Alice")

    res = runner.invoke(app, ["match", str(gallery), str(probe), "--threshold", "0.05"])
    assert res.exit_code == 1


def test_replay_without_liveness(tmp_path):
    rec = tmp_path / "rec.yaml"
    rec.write_text(
        yaml.safe_dump({"frames": [None, _frame()], "gallery": [{"id": "s1", "name": "Alice", "descriptor": [0.0, 0.0]}]}),
        encoding="utf-8",
    )
    res = runner.invoke(app, ["replay", str(rec), "--no-liveness"])
    assert res.exit_code == 0
    out = json.loads(res.output[res.output.index("{"):])
    assert out["match"]["person_id"] == "s1"


def test_replay_photo_fails(tmp_path):
    rec = tmp_path / "rec.yaml"
    rec.write_text(yaml.safe_dump({"frames": [_frame()] * 150}), encoding="utf-8")
    res = runner.invoke(app, ["replay", str(rec), "--seed", "5"])
    assert res.exit_code == 0
    out = json.loads(res.output[res.output.index("{"):])
    assert out["status"] == "FAILED"
    assert out["failed_attempts"] == 3
