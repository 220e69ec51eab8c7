from .ear import LEFT_EYE, RIGHT_EYE, EAR_FALLBACK, calculate_ear, calculate_average_ear, extract_eye_landmarks, is_blinking
from .blink import BlinkDetector
from .head_pose import HeadPoseDetector
from .challenges import get_random_challenges
from .session import LivenessSession

__all__ = [
    "LEFT_EYE",
    "RIGHT_EYE",
    "EAR_FALLBACK",
    "calculate_ear",
    "calculate_average_ear",
    "extract_eye_landmarks",
    "is_blinking",
    "BlinkDetector",
    "HeadPoseDetector",
    "get_random_challenges",
    "LivenessSession",
]
