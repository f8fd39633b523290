from .pipeline import Pipeline
from .face_check_in_pipeline import FaceCheckInPipeline

__all__ = [
    "Pipeline",
    "FaceCheckInPipeline",
]
