from datetime import datetime

from pydantic import BaseModel, Field

from .bounding_box import BoundingBox


class RecognitionEvent(BaseModel):
    employee_id: str
    name: str | None = None
    confidence: float
    timestamp: datetime = Field(default_factory=datetime.now)
    face_box: BoundingBox | None = None
    detection_type: str = "FACE_RECOGNITION"
