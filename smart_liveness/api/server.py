import dataclasses
import random
import threading
import uuid
from typing import Dict, List, Optional, Union

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from smart_liveness.app.config import load_config
from smart_liveness.app.logging_config import setup_logging
from smart_liveness.app.utils import Point, now_ts
from smart_liveness.liveness.session import LivenessSession
from smart_liveness.models import KnownPerson
from smart_liveness.recognition.matcher import FaceMatcher, recognize_face


app = FastAPI(title="Smart Liveness API", version="0.1.0")
cfg = load_config()
setup_logging(cfg.log_level)
matcher = FaceMatcher(cfg.recognition)
sessions: Dict[str, LivenessSession] = {}
_last_seen: Dict[str, float] = {}
_sessions_lock = threading.Lock()


class PointModel(BaseModel):
    x: float
    y: float


class CreateSessionRequest(BaseModel):
    seed: Optional[int] = None
    settings: Dict[str, Union[int, float]] = {}


class FrameRequest(BaseModel):
    landmarks: List[PointModel]


class PersonModel(BaseModel):
    id: str
    name: str
    descriptor: List[float]


class RecognizeRequest(BaseModel):
    descriptor: List[float]
    gallery: List[PersonModel]
    threshold: Optional[float] = None


class MatchResponse(BaseModel):
    person_id: Optional[str] = None
    person_name: Optional[str] = None
    distance: Optional[float] = None
    confidence: float = 0.0


def _drop(session_id: str) -> None:
    session = sessions.pop(session_id, None)
    _last_seen.pop(session_id, None)
    if session is not None:
        session.stop_verification()


def purge_sessions(now: float) -> None:
    """Drop sessions idle longer than the TTL, then the least recently used ones over the cap."""
    with _sessions_lock:
        for sid in [sid for sid, ts in _last_seen.items() if now - ts > cfg.api.session_ttl]:
            _drop(sid)
        overflow = len(sessions) - max(0, cfg.api.max_sessions - 1)
        if overflow > 0:
            for sid in sorted(_last_seen, key=_last_seen.get)[:overflow]:
                _drop(sid)


def _get(session_id: str) -> LivenessSession:
    with _sessions_lock:
        session = sessions.get(session_id)
        if session is not None:
            _last_seen[session_id] = now_ts()
    if session is None:
        raise HTTPException(status_code=404, detail="unknown session")
    return session


def _view(session_id: str, session: LivenessSession) -> dict:
    return dict(session_id=session_id, status=session.status.value, **dataclasses.asdict(session.state))


@app.post("/sessions")
def create_session(req: CreateSessionRequest):
    settings = cfg.liveness
    if req.settings:
        try:
            settings = dataclasses.replace(settings, **req.settings)
        except TypeError as e:
            raise HTTPException(status_code=422, detail=str(e))
    rng = random.Random(req.seed) if req.seed is not None else None
    session_id = str(uuid.uuid4())
    session = LivenessSession(settings, rng=rng)
    purge_sessions(now_ts())
    with _sessions_lock:
        sessions[session_id] = session
        _last_seen[session_id] = now_ts()
    return _view(session_id, session)


@app.get("/sessions/{session_id}")
def get_session(session_id: str):
    return _view(session_id, _get(session_id))


@app.post("/sessions/{session_id}/start")
def start_session(session_id: str):
    session = _get(session_id)
    if not session.start_verification():
        raise HTTPException(status_code=409, detail=f"session is {session.status.value}; reset it first")
    return _view(session_id, session)


@app.post("/sessions/{session_id}/frames")
def push_frame(session_id: str, req: FrameRequest):
    session = _get(session_id)
    session.process_frame([Point(p.x, p.y) for p in req.landmarks])
    return _view(session_id, session)


@app.post("/sessions/{session_id}/stop")
def stop_session(session_id: str):
    session = _get(session_id)
    session.stop_verification()
    return _view(session_id, session)


@app.post("/sessions/{session_id}/reset")
def reset_session(session_id: str):
    session = _get(session_id)
    session.reset_verification()
    return _view(session_id, session)


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str):
    _get(session_id)
    with _sessions_lock:
        _drop(session_id)
    return {"deleted": session_id}


@app.post("/recognize", response_model=MatchResponse)
def recognize(req: RecognizeRequest):
    gallery = [KnownPerson(p.id, p.name, p.descriptor) for p in req.gallery]
    if req.threshold is None:
        res = matcher.recognize_face(req.descriptor, gallery)
    else:
        res = recognize_face(req.descriptor, gallery, req.threshold) if gallery else None
    if res is None:
        return MatchResponse()
    return MatchResponse(person_id=res.person_id, person_name=res.person_name, distance=res.distance, confidence=res.confidence)
