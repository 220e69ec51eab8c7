from typing import List, Optional, Tuple

import yaml

from smart_liveness.app.utils import as_point
from smart_liveness.models import FaceObservation, KnownPerson


def _observation(item) -> Optional[FaceObservation]:
    if not item:
        return None
    return FaceObservation(
        landmarks=[as_point(p) for p in item.get("landmarks") or []],
        descriptor=item.get("descriptor"),
        score=float(item.get("score", 1.0)),
    )


def load_gallery(items) -> List[KnownPerson]:
    return [KnownPerson(str(p["id"]), str(p.get("name", p["id"])), p["descriptor"]) for p in items or []]


def load_recording(path: str) -> Tuple[List[Optional[FaceObservation]], List[KnownPerson]]:
    """Read a YAML (or JSON) capture: `frames` of landmarks/descriptor/score plus an optional `gallery`.

    A null frame stands for a capture with no face in it.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    frames = [_observation(item) for item in data.get("frames") or []]
    return frames, load_gallery(data.get("gallery"))
