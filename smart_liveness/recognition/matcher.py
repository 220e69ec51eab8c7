import dataclasses
import logging
from typing import Iterable, Optional

import numpy as np

from smart_liveness.app.config import FaceRecognitionSettings
from smart_liveness.app.utils import Descriptor, as_descriptor
from smart_liveness.models.base import FaceMatch, KnownPerson


logger = logging.getLogger(__name__)


def recognize_face(probe: Descriptor, known_persons: Iterable[KnownPerson], threshold: float) -> Optional[FaceMatch]:
    """Nearest gallery entry by euclidean distance, or None if it is farther than `threshold`."""
    q = as_descriptor(probe)
    best: Optional[FaceMatch] = None
    for person in known_persons:
        ref = as_descriptor(person.descriptor)
        # Skip entries from a different embedder
        if ref.size != q.size:
            logger.warning("Skipping %s: descriptor size %d != %d", person.id, ref.size, q.size)
            continue
        dist = float(np.linalg.norm(q - ref))
        if not np.isfinite(dist):
            logger.warning("Skipping %s: non-finite distance", person.id)
            continue
        # Strict comparison keeps the first of equally close entries
        if best is None or dist < best.distance:
            best = FaceMatch(person.id, person.name, dist, max(0.0, 1.0 - dist))

    if best is None or best.distance > threshold:
        return None
    return best


class FaceMatcher:
    def __init__(self, settings: Optional[FaceRecognitionSettings] = None):
        self.settings = settings or FaceRecognitionSettings()

    def update_settings(self, **changes) -> FaceRecognitionSettings:
        self.settings = dataclasses.replace(self.settings, **changes)
        return self.settings

    def recognize_face(self, probe: Descriptor, known_persons: Iterable[KnownPerson]) -> Optional[FaceMatch]:
        persons = list(known_persons)
        if not persons:
            return None
        return recognize_face(probe, persons, self.settings.recognition_threshold)
