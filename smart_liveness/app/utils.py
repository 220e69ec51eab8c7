import math
import time
from dataclasses import dataclass
from typing import Sequence, Union
import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float


Descriptor = Union[Sequence[float], np.ndarray]


def now_ts() -> float:
    return time.time()


def distance(p1: Point, p2: Point) -> float:
    return math.sqrt((p2.x - p1.x) ** 2 + (p2.y - p1.y) ** 2)


def as_point(obj) -> Point:
    """Coerce a landmark given as Point, {"x", "y"} mapping, object with x/y or (x, y) pair."""
    if isinstance(obj, Point):
        return obj
    if isinstance(obj, dict):
        return Point(float(obj["x"]), float(obj["y"]))
    if hasattr(obj, "x") and hasattr(obj, "y"):
        return Point(float(obj.x), float(obj.y))
    x, y = obj
    return Point(float(x), float(y))


def as_descriptor(vec: Descriptor) -> np.ndarray:
    return np.asarray(vec, dtype=np.float64).reshape(-1)


def euclidean_distance(a: Descriptor, b: Descriptor) -> float:
    return float(np.linalg.norm(as_descriptor(a) - as_descriptor(b)))
