import logging
import os
import yaml
from dataclasses import dataclass, field, fields


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS = [
    os.environ.get("SMART_LIVENESS_CONFIG", ""),
    ".smart-liveness.yaml",
    "./config.yaml",
    "/etc/smart-liveness/config.yaml",
]


@dataclass(frozen=True)
class LivenessSettings:
    # Attendance-page defaults; see DEFAULT_LIVENESS_SETTINGS for the stricter base values
    ear_threshold: float = 0.25
    consecutive_frames: int = 1
    challenge_timeout: float = 10.0  # seconds, one timer per attempt
    max_failed_attempts: int = 3
    required_blinks: int = 2
    challenge_count: int = 3


DEFAULT_LIVENESS_SETTINGS = LivenessSettings(
    ear_threshold=0.21,
    consecutive_frames=2,
    challenge_timeout=5.0,
    max_failed_attempts=3,
    required_blinks=2,
)


@dataclass(frozen=True)
class FaceRecognitionSettings:
    recognition_threshold: float = 0.5  # euclidean distance between descriptors
    detection_threshold: float = 0.5


@dataclass
class PipelineConfig:
    frame_interval: float = 0.3  # seconds between captured frames
    require_liveness: bool = True


@dataclass
class ApiConfig:
    session_ttl: float = 600.0  # seconds since last request before a session is dropped
    max_sessions: int = 1000


@dataclass
class AppConfig:
    liveness: LivenessSettings = field(default_factory=LivenessSettings)
    recognition: FaceRecognitionSettings = field(default_factory=FaceRecognitionSettings)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    api: ApiConfig = field(default_factory=ApiConfig)
    log_level: str = "INFO"


def _merge_dict(d: dict, u: dict) -> dict:
    for k, v in u.items():
        if isinstance(v, dict) and isinstance(d.get(k), dict):
            d[k] = _merge_dict(d[k], v)
        else:
            d[k] = v
    return d


def _as_dict(obj) -> dict:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}


def _as_bool(v) -> bool:
    if isinstance(v, bool):
        return v
    raise TypeError(f"expected true/false, got {v!r}")


_CONVERTERS = {float: float, int: int, bool: _as_bool, str: str}


def _build(cls, values: dict):
    """Instantiate a config section, converting each value to its declared type."""
    known = {f.name: f.type for f in fields(cls)}
    unknown = set(values) - set(known)
    if unknown:
        raise TypeError(f"unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**{k: _CONVERTERS.get(known[k], lambda x: x)(v) for k, v in values.items()})


def load_config(paths=None) -> AppConfig:
    cfg = AppConfig()
    for p in [p for p in (paths if paths is not None else DEFAULT_CONFIG_PATHS) if p]:
        if not os.path.exists(p):
            continue
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            merged = _merge_dict(
                {
                    "liveness": _as_dict(cfg.liveness),
                    "recognition": _as_dict(cfg.recognition),
                    "pipeline": _as_dict(cfg.pipeline),
                    "api": _as_dict(cfg.api),
                },
                data,
            )
            cfg = AppConfig(
                liveness=_build(LivenessSettings, merged["liveness"]),
                recognition=_build(FaceRecognitionSettings, merged["recognition"]),
                pipeline=_build(PipelineConfig, merged["pipeline"]),
                api=_build(ApiConfig, merged["api"]),
                log_level=str(merged.get("log_level", cfg.log_level)),
            )
        except (OSError, yaml.YAMLError, TypeError, ValueError, AttributeError) as e:
            # Keep whatever was loaded so far
            logger.warning("Ignoring config file %s: %s", p, e)
    return cfg
