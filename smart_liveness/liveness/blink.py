from typing import Sequence

from smart_liveness.liveness.ear import calculate_average_ear
from smart_liveness.models.base import BlinkResult


class BlinkDetector:
    """Turns a per-frame EAR signal into discrete blinks.

    A blink needs at least `consecutive_frames` closed frames and is only
    counted once the eye reopens, so one long closure counts once.
    """

    def __init__(self, ear_threshold: float = 0.21, consecutive_frames: int = 2):
        self.ear_threshold = ear_threshold
        self.consecutive_frames = consecutive_frames
        self.frame_counter = 0
        self.blink_counter = 0
        self.was_blinking = False

    def detect(self, landmarks: Sequence) -> BlinkResult:
        return self.detect_ear(calculate_average_ear(landmarks))

    def detect_ear(self, ear: float) -> BlinkResult:
        currently_blinking = ear < self.ear_threshold
        blink_detected = False

        if currently_blinking:
            self.frame_counter += 1
        else:
            if self.was_blinking and self.frame_counter >= self.consecutive_frames:
                self.blink_counter += 1
                blink_detected = True
            self.frame_counter = 0

        self.was_blinking = currently_blinking
        return BlinkResult(
            is_blinking=currently_blinking,
            blink_detected=blink_detected,
            ear=ear,
            total_blinks=self.blink_counter,
        )

    def reset(self) -> None:
        self.frame_counter = 0
        self.blink_counter = 0
        self.was_blinking = False

    def get_blink_count(self) -> int:
        return self.blink_counter
