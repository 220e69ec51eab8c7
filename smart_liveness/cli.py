import dataclasses
import json
import random
from typing import Optional
import typer
import uvicorn
from smart_liveness.app.config import load_config
from smart_liveness.app.logging_config import setup_logging
from smart_liveness.app.timers import ManualScheduler
from smart_liveness.pipeline import LivenessPipeline, RecordedFaceAnalyzer, load_gallery, load_recording
from smart_liveness.recognition.matcher import FaceMatcher


app = typer.Typer(name="liveness")


@app.command()
def api(host: str = "127.0.0.1", port: int = 8000):
    """Run the FastAPI service."""
    uvicorn.run("smart_liveness.api.server:app", host=host, port=port, reload=False)


@app.command()
def replay(recording: str, seed: Optional[int] = None, no_liveness: bool = False):
    """Replay a landmark recording through a liveness session on a virtual clock."""
    cfg = load_config()
    setup_logging(cfg.log_level)
    if no_liveness:
        cfg.pipeline.require_liveness = False
    observations, gallery = load_recording(recording)
    scheduler = ManualScheduler()
    pipe = LivenessPipeline(
        cfg,
        RecordedFaceAnalyzer(observations),
        scheduler=scheduler,
        rng=random.Random(seed) if seed is not None else None,
    )
    res = pipe.run(range(len(observations)), gallery)
    if res is None:
        typer.echo("Recording has no frames")
        raise typer.Exit(code=1)
    out = {
        "status": res.status.value,
        "challenges": [c.action.value for c in res.state.challenges],
        "blink_count": res.state.blink_count,
        "failed_attempts": res.state.failed_attempts,
        "match": dataclasses.asdict(res.match) if res.match else None,
    }
    typer.echo(json.dumps(out, indent=2))


@app.command()
def match(gallery_path: str, probe_path: str, threshold: Optional[float] = None):
    """Match a probe descriptor (YAML/JSON list) against a gallery file."""
    import yaml

    cfg = load_config()
    setup_logging(cfg.log_level)
    with open(gallery_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    gallery = load_gallery(data.get("gallery") if isinstance(data, dict) else data)
    with open(probe_path, "r", encoding="utf-8") as f:
        probe = yaml.safe_load(f)
    matcher = FaceMatcher(cfg.recognition)
    if threshold is not None:
        matcher.update_settings(recognition_threshold=threshold)
    res = matcher.recognize_face(probe, gallery)
    if res is None:
        typer.echo("No match")
        raise typer.Exit(code=1)
    typer.echo(f"{res.person_id} {res.person_name} distance={res.distance:.4f} confidence={res.confidence:.4f}")


if __name__ == "__main__":
    app()
