import logging
from typing import Optional, Sequence

from smart_liveness.app.utils import Point, as_point, distance
from smart_liveness.models.base import HeadPoseResult, LivenessAction


logger = logging.getLogger(__name__)

NOSE_TIP = 30
LEFT_EYE_OUTER = 36
RIGHT_EYE_OUTER = 45


def _landmark(landmarks: Sequence, idx: int) -> Optional[Point]:
    try:
        if idx >= len(landmarks) or landmarks[idx] is None:
            return None
        return as_point(landmarks[idx])
    except (KeyError, TypeError, ValueError):
        return None


class HeadPoseDetector:
    """Left/right turn from where the nose tip sits between the outer eye corners.

    ratio = d(left corner, nose) / (d(left corner, nose) + d(right corner, nose));
    0.5 is facing the camera. Each frame is judged on its own.
    """

    def __init__(self, left_threshold: float = 0.35, right_threshold: float = 0.65):
        self.left_threshold = left_threshold
        self.right_threshold = right_threshold

    def detect(self, landmarks: Sequence) -> HeadPoseResult:
        nose = _landmark(landmarks, NOSE_TIP)
        left = _landmark(landmarks, LEFT_EYE_OUTER)
        right = _landmark(landmarks, RIGHT_EYE_OUTER)
        if nose is None or left is None or right is None:
            return HeadPoseResult(None, 0.5)

        d_left = distance(left, nose)
        d_right = distance(right, nose)
        total = d_left + d_right
        if total == 0:
            return HeadPoseResult(None, 0.5)

        ratio = d_left / total
        if ratio < self.left_threshold:
            return HeadPoseResult(LivenessAction.TURN_LEFT, ratio)
        if ratio > self.right_threshold:
            return HeadPoseResult(LivenessAction.TURN_RIGHT, ratio)
        return HeadPoseResult(None, ratio)
