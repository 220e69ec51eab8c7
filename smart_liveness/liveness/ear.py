"""Eye Aspect Ratio over the 68-point landmark scheme.

Each eye contour is ordered outer corner, two upper lid points, inner corner,
two lower lid points. An open eye sits around 0.3; a closed one drops well
below 0.2.
"""
import logging
from typing import List, Sequence, Tuple

from smart_liveness.app.utils import Point, as_point, distance


logger = logging.getLogger(__name__)

LEFT_EYE = (36, 37, 38, 39, 40, 41)
RIGHT_EYE = (42, 43, 44, 45, 46, 47)

# Returned for unusable input; reads as "eyes open"
EAR_FALLBACK = 0.3


def calculate_ear(eye_points: Sequence[Point]) -> float:
    if len(eye_points) != 6:
        logger.warning("EAR calculation requires exactly 6 eye points, got %d", len(eye_points))
        return EAR_FALLBACK

    vertical1 = distance(eye_points[1], eye_points[5])
    vertical2 = distance(eye_points[2], eye_points[4])
    horizontal = distance(eye_points[0], eye_points[3])
    if horizontal == 0:
        return EAR_FALLBACK
    return (vertical1 + vertical2) / (2.0 * horizontal)


def _pick(landmarks: Sequence, indices: Sequence[int]) -> List[Point]:
    pts: List[Point] = []
    try:
        n = len(landmarks)
    except TypeError:
        return pts
    for idx in indices:
        try:
            if idx >= n or landmarks[idx] is None:
                continue
            pts.append(as_point(landmarks[idx]))
        except (KeyError, TypeError, ValueError):
            continue
    return pts


def extract_eye_landmarks(landmarks: Sequence) -> Tuple[List[Point], List[Point]]:
    """Left and right eye contours. Missing or malformed points are dropped."""
    if landmarks is None:
        return [], []
    return _pick(landmarks, LEFT_EYE), _pick(landmarks, RIGHT_EYE)


def calculate_average_ear(landmarks: Sequence) -> float:
    left_eye, right_eye = extract_eye_landmarks(landmarks)
    return (calculate_ear(left_eye) + calculate_ear(right_eye)) / 2.0


def is_blinking(landmarks: Sequence, threshold: float = 0.21) -> bool:
    return calculate_average_ear(landmarks) < threshold
