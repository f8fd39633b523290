from pydantic import BaseModel

UNKNOWN_LABEL = "Unknown"


class MatchResult(BaseModel):
    label: str = UNKNOWN_LABEL
    name: str | None = None
    distance: float = 1.0
    confidence: float = 0.0
    average_distance: float = 1.0
    average_confidence: float = 0.0

    @property
    def is_unknown(self) -> bool:
        return self.label == UNKNOWN_LABEL
