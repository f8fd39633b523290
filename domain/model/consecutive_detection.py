from pydantic import BaseModel


class ConsecutiveDetection(BaseModel):
    count: int = 1
    last_detection: float
    average_distance: float
