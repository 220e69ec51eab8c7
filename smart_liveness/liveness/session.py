import copy
import dataclasses
import logging
import random
import threading
from typing import Callable, Optional, Sequence

from smart_liveness.app.config import LivenessSettings
from smart_liveness.app.timers import Scheduler, ThreadingScheduler, TimerHandle
from smart_liveness.app.utils import now_ts
from smart_liveness.liveness.blink import BlinkDetector
from smart_liveness.liveness.challenges import get_random_challenges
from smart_liveness.liveness.head_pose import HeadPoseDetector
from smart_liveness.models.base import LivenessAction, LivenessState, SessionStatus


logger = logging.getLogger(__name__)


class LivenessSession:
    """Challenge-response liveness check for one subject.

    IDLE -> ACTIVE -> VERIFIED, or FAILED once `max_failed_attempts` timeouts
    have accumulated. Both end states stay put until `reset_verification()`.
    After a timeout that leaves attempts in hand the session is inactive and
    the host calls `start_verification()` again; nothing restarts on its own.

    One timeout covers the whole challenge batch and is not re-armed when a
    challenge completes. Blinks are counted across the attempt, so several
    BLINK challenges in one batch can be met by the same blinks.
    """

    def __init__(
        self,
        settings: Optional[LivenessSettings] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], float]] = None,
        head_pose: Optional[HeadPoseDetector] = None,
    ):
        self._settings = settings or LivenessSettings()
        self._scheduler = scheduler or ThreadingScheduler()
        self._rng = rng or random.Random()
        self._clock = clock or now_ts
        self._head_pose = head_pose or HeadPoseDetector()
        self._lock = threading.RLock()
        self._state = LivenessState()
        self._blink_detector: Optional[BlinkDetector] = None
        self._timer: Optional[TimerHandle] = None
        self._attempt = 0
        self._failed = False
        # Settings the running attempt was started with
        self._attempt_settings: Optional[LivenessSettings] = None

    @property
    def settings(self) -> LivenessSettings:
        return self._settings

    @property
    def state(self) -> LivenessState:
        with self._lock:
            return copy.deepcopy(self._state)

    @property
    def status(self) -> SessionStatus:
        with self._lock:
            return self._status()

    def _status(self) -> SessionStatus:
        # Between attempts the limit is the one the next attempt would run with
        if self._state.is_active and self._attempt_settings is not None:
            limit = self._attempt_settings.max_failed_attempts
        else:
            limit = self._settings.max_failed_attempts
        if self._state.is_verified:
            return SessionStatus.VERIFIED
        if self._failed or self._state.failed_attempts >= limit:
            return SessionStatus.FAILED
        if self._state.is_active:
            return SessionStatus.ACTIVE
        return SessionStatus.IDLE

    def update_settings(self, **changes) -> LivenessSettings:
        """Merge new values; the attempt in progress keeps its own copy."""
        with self._lock:
            self._settings = dataclasses.replace(self._settings, **changes)
            return self._settings

    def start_verification(self) -> bool:
        with self._lock:
            status = self._status()
            if status in (SessionStatus.VERIFIED, SessionStatus.FAILED):
                logger.warning("Liveness session is %s; reset before starting again", status.value)
                return False

            self._cancel_timer()
            s = self._settings
            self._attempt_settings = s
            self._attempt += 1
            self._blink_detector = BlinkDetector(s.ear_threshold, s.consecutive_frames)
            challenges = get_random_challenges(
                max(1, int(s.challenge_count)),
                rng=self._rng,
                required_blinks=s.required_blinks,
                now=self._clock(),
            )
            self._state = LivenessState(
                is_active=True,
                current_challenge=challenges[0],
                challenges=challenges,
                current_challenge_index=0,
                failed_attempts=self._state.failed_attempts,
            )
            attempt = self._attempt
            self._timer = self._scheduler.call_later(s.challenge_timeout, lambda: self._on_timeout(attempt))
            logger.info(
                "Liveness attempt %d started: %s",
                attempt,
                ", ".join(c.action.value for c in challenges),
            )
            return True

    def process_frame(self, landmarks: Sequence) -> LivenessState:
        with self._lock:
            state = self._state
            if not state.is_active or state.current_challenge is None or self._blink_detector is None:
                return copy.deepcopy(state)

            s = self._attempt_settings or self._settings
            frame = landmarks if landmarks is not None else []
            result = self._blink_detector.detect(frame)
            state.blink_count = result.total_blinks
            state.last_ear = result.ear
            state.is_blinking = result.is_blinking

            challenge = state.current_challenge
            if challenge.action == LivenessAction.BLINK:
                done = result.total_blinks >= s.required_blinks
            elif challenge.action in (LivenessAction.TURN_LEFT, LivenessAction.TURN_RIGHT):
                done = self._head_pose.detect(frame).action == challenge.action
            else:
                done = False

            if done:
                self._complete_current()
            return copy.deepcopy(state)

    def _complete_current(self) -> None:
        state = self._state
        challenge = state.current_challenge
        challenge.completed = True
        challenge.completed_time = self._clock()
        logger.debug("Challenge %s completed", challenge.action.value)

        next_index = state.current_challenge_index + 1
        if next_index >= len(state.challenges):
            self._cancel_timer()
            state.is_verified = True
            state.is_active = False
            logger.info("Liveness verified after %d challenge(s)", len(state.challenges))
            return
        state.current_challenge_index = next_index
        state.current_challenge = state.challenges[next_index]

    def _on_timeout(self, attempt: int) -> None:
        with self._lock:
            # A superseded attempt's timer must not touch the current state
            if attempt != self._attempt or not self._state.is_active:
                return
            self._timer = None
            s = self._attempt_settings or self._settings
            self._state.failed_attempts += 1
            self._state.is_active = False
            self._failed = self._state.failed_attempts >= s.max_failed_attempts
            logger.warning(
                "Liveness attempt %d timed out (%d/%d failures)",
                attempt,
                self._state.failed_attempts,
                s.max_failed_attempts,
            )

    def stop_verification(self) -> None:
        with self._lock:
            self._cancel_timer()
            if self._blink_detector is not None:
                self._blink_detector.reset()
            self._state.is_active = False

    def reset_verification(self) -> None:
        with self._lock:
            self._cancel_timer()
            if self._blink_detector is not None:
                self._blink_detector.reset()
            self._attempt += 1
            self._attempt_settings = None
            self._failed = False
            self._state = LivenessState()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
