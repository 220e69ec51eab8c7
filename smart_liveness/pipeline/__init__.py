from .liveness_pipeline import LivenessPipeline, PipelineResult, RecordedFaceAnalyzer
from .recording import load_gallery, load_recording

__all__ = ["LivenessPipeline", "PipelineResult", "RecordedFaceAnalyzer", "load_gallery", "load_recording"]
