from smart_liveness.app.utils import Point


EYE_WIDTH = 30.0


def _eye(x0: float, y: float, ear: float):
    v = ear * EYE_WIDTH
    return [
        Point(x0, y),
        Point(x0 + 10, y - v / 2),
        Point(x0 + 20, y - v / 2),
        Point(x0 + EYE_WIDTH, y),
        Point(x0 + 20, y + v / 2),
        Point(x0 + 10, y + v / 2),
    ]


def make_face(ear: float = 0.3, ratio: float = 0.5):
    """68 landmarks with both eyes at `ear` and the nose at `ratio` between the outer eye corners.

    Left outer corner (36) is at (100, 100), right outer corner (45) at (200, 100).
    """
    pts = [Point(0.0, 0.0)] * 68
    pts[36:42] = _eye(100.0, 100.0, ear)
    pts[42:48] = _eye(170.0, 100.0, ear)
    pts[30] = Point(100.0 + ratio * 100.0, 100.0)
    return pts


class ScriptedRng:
    """Stands in for random.Random; `choice` returns the scripted actions in order."""

    def __init__(self, actions):
        self._it = iter(actions)

    def choice(self, seq):
        return next(self._it)
