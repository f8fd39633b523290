import numpy as np
from pydantic import BaseModel, Field

from .bounding_box import BoundingBox
from .face_landmarks import FaceLandmarks


class DetectionResult(BaseModel):
    bounding_boxes: BoundingBox
    landmarks: FaceLandmarks = Field(default_factory=FaceLandmarks)
    descriptor: list[float] = Field(default_factory=list)

    def descriptor_array(self) -> np.ndarray:
        return np.asarray(self.descriptor, dtype=np.float32)
