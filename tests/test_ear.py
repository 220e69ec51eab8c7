import pytest

from smart_liveness.app.utils import Point, distance
from smart_liveness.liveness.ear import (
    EAR_FALLBACK,
    calculate_average_ear,
    calculate_ear,
    extract_eye_landmarks,
    is_blinking,
)
from conftest import make_face


def test_distance():
    assert distance(Point(0, 0), Point(3, 4)) == 5.0


def test_ear_formula():
    eye = [Point(0, 0), Point(10, -3), Point(20, -3), Point(30, 0), Point(20, 3), Point(10, 3)]
    assert calculate_ear(eye) == pytest.approx((6 + 6) / (2 * 30))


def test_ear_zero_width_falls_back():
    eye = [Point(5, 5), Point(5, 0), Point(5, 0), Point(5, 5), Point(5, 10), Point(5, 10)]
    assert calculate_ear(eye) == 0.3


@pytest.mark.parametrize("n", [5, 7])
def test_ear_wrong_point_count(n):
    assert calculate_ear([Point(i, i) for i in range(n)]) == EAR_FALLBACK


def test_average_ear_uses_both_eyes():
    lm = make_face(ear=0.3)
    lm[42:48] = make_face(ear=0.1)[42:48]
    assert calculate_average_ear(lm) == pytest.approx(0.2)


def test_short_landmarks_do_not_raise():
    left, right = extract_eye_landmarks([Point(0, 0)] * 40)
    assert len(left) == 4 and right == []
    assert calculate_average_ear([Point(0, 0)] * 40) == EAR_FALLBACK
    assert calculate_average_ear([]) == EAR_FALLBACK


def test_landmarks_as_dicts_and_pairs():
    lm = [{"x": p.x, "y": p.y} for p in make_face(ear=0.15)]
    assert calculate_average_ear(lm) == pytest.approx(0.15)
    pairs = [(p.x, p.y) for p in make_face(ear=0.15)]
    assert calculate_average_ear(pairs) == pytest.approx(0.15)


def test_is_blinking():
    assert is_blinking(make_face(ear=0.1))
    assert not is_blinking(make_face(ear=0.3))


def test_non_sequence_landmarks_fall_back():
    assert calculate_average_ear(5) == EAR_FALLBACK
    assert calculate_average_ear({"x": 1.0}) == EAR_FALLBACK
