from .base import (
    LivenessAction,
    SessionStatus,
    LivenessChallenge,
    LivenessState,
    BlinkResult,
    HeadPoseResult,
    KnownPerson,
    FaceMatch,
    FaceObservation,
    FaceAnalyzer,
)

__all__ = [
    "LivenessAction",
    "SessionStatus",
    "LivenessChallenge",
    "LivenessState",
    "BlinkResult",
    "HeadPoseResult",
    "KnownPerson",
    "FaceMatch",
    "FaceObservation",
    "FaceAnalyzer",
]
