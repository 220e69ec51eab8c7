import logging
import random
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from smart_liveness.app.config import AppConfig
from smart_liveness.app.timers import ManualScheduler, Scheduler
from smart_liveness.liveness.session import LivenessSession
from smart_liveness.models import FaceAnalyzer, FaceMatch, FaceObservation, KnownPerson, LivenessState, SessionStatus
from smart_liveness.recognition.matcher import FaceMatcher


logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    status: SessionStatus
    state: LivenessState
    match: Optional[FaceMatch]
    observation: Optional[FaceObservation]


class LivenessPipeline:
    """Capture-loop glue: analyzer -> liveness session -> matcher.

    The analyzer is the only piece that touches detection models; the
    session and matcher only ever see landmarks and descriptors.
    """

    def __init__(
        self,
        cfg: AppConfig,
        analyzer: FaceAnalyzer,
        session: Optional[LivenessSession] = None,
        matcher: Optional[FaceMatcher] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.cfg = cfg
        self.analyzer = analyzer
        self.scheduler = scheduler
        if session is None:
            clock = scheduler.time if isinstance(scheduler, ManualScheduler) else None
            session = LivenessSession(cfg.liveness, scheduler=scheduler, rng=rng, clock=clock)
        self.session = session
        self.matcher = matcher or FaceMatcher(cfg.recognition)

    def start(self) -> bool:
        return self.session.start_verification()

    def detect(self, frame: Any) -> Optional[FaceObservation]:
        obs = self.analyzer.analyze(frame)
        if obs is None:
            return None
        if obs.score < self.matcher.settings.detection_threshold:
            return None
        return obs

    def process(self, frame: Any, gallery: List[KnownPerson]) -> PipelineResult:
        obs = self.detect(frame)
        match: Optional[FaceMatch] = None
        if obs is not None:
            if self.session.status == SessionStatus.ACTIVE:
                self.session.process_frame(obs.landmarks)
            live = self.session.status == SessionStatus.VERIFIED or not self.cfg.pipeline.require_liveness
            if live and obs.descriptor is not None:
                match = self.matcher.recognize_face(obs.descriptor, gallery)
        return PipelineResult(self.session.status, self.session.state, match, obs)

    def run(self, frames: Iterable[Any], gallery: List[KnownPerson]) -> Optional[PipelineResult]:
        """Feed frames until someone is matched or the session fails.

        Retries after a timeout while attempts remain. With a ManualScheduler
        the virtual clock moves `frame_interval` per frame.
        """
        result: Optional[PipelineResult] = None
        for frame in frames:
            if self.cfg.pipeline.require_liveness and self.session.status == SessionStatus.IDLE:
                self.start()
            result = self.process(frame, gallery)
            if result.match is not None:
                logger.info("Matched %s (distance %.3f)", result.match.person_id, result.match.distance)
                break
            if result.status == SessionStatus.FAILED:
                logger.warning("Liveness failed after %d attempt(s)", result.state.failed_attempts)
                break
            if isinstance(self.scheduler, ManualScheduler):
                self.scheduler.advance(self.cfg.pipeline.frame_interval)
        return result


class RecordedFaceAnalyzer(FaceAnalyzer):
    """Analyzer over pre-extracted observations; a frame is its index into the recording."""

    def __init__(self, observations: List[Optional[FaceObservation]]):
        self.observations = observations

    def analyze(self, frame: Any) -> Optional[FaceObservation]:
        idx = int(frame)
        if 0 <= idx < len(self.observations):
            return self.observations[idx]
        return None
