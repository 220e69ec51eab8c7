from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence

from smart_liveness.app.utils import Descriptor, Point


class LivenessAction(str, Enum):
    BLINK = "BLINK"
    TURN_LEFT = "TURN_LEFT"
    TURN_RIGHT = "TURN_RIGHT"
    # Reserved, never generated
    SMILE = "SMILE"
    NOD = "NOD"


class SessionStatus(str, Enum):
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    VERIFIED = "VERIFIED"
    FAILED = "FAILED"


@dataclass
class LivenessChallenge:
    action: LivenessAction
    instruction: str
    completed: bool = False
    start_time: Optional[float] = None
    completed_time: Optional[float] = None


@dataclass
class LivenessState:
    is_active: bool = False
    current_challenge: Optional[LivenessChallenge] = None
    challenges: List[LivenessChallenge] = field(default_factory=list)
    current_challenge_index: int = 0
    is_verified: bool = False
    failed_attempts: int = 0
    blink_count: int = 0
    last_ear: float = 0.3
    is_blinking: bool = False


@dataclass
class BlinkResult:
    is_blinking: bool
    blink_detected: bool
    ear: float
    total_blinks: int


@dataclass
class HeadPoseResult:
    action: Optional[LivenessAction]
    rating: float


@dataclass
class KnownPerson:
    id: str
    name: str
    descriptor: Descriptor


@dataclass
class FaceMatch:
    person_id: str
    person_name: str
    distance: float
    confidence: float


@dataclass
class FaceObservation:
    landmarks: Sequence[Point]  # 68 points, canonical ordering
    descriptor: Optional[Descriptor] = None
    score: float = 1.0


class FaceAnalyzer:
    """Model provider: turns a captured frame into landmarks and a descriptor."""

    def analyze(self, frame: Any) -> Optional[FaceObservation]:
        raise NotImplementedError
