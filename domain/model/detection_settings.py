from pydantic import BaseModel, ConfigDict, Field

DESCRIPTOR_SIZE = 128


class DetectionSettings(BaseModel):
    """Tunables of the check-in session.

    Field aliases are the upper-case names used by the settings file and the
    command line, e.g. ``MIN_FACE_SIZE``. Ranges follow the settings screen of
    the dashboard.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    min_confidence: float = Field(0.5, ge=0, le=1, alias="MIN_CONFIDENCE")
    recognition_threshold: float = Field(0.6, ge=0, le=1, alias="RECOGNITION_THRESHOLD")
    min_face_size: int = Field(80, ge=20, le=200, alias="MIN_FACE_SIZE")
    required_consecutive_detections: int = Field(2, ge=1, le=10, alias="REQUIRED_CONSECUTIVE_DETECTIONS")
    detection_interval: int = Field(100, ge=100, le=5000, alias="DETECTION_INTERVAL")
    max_angle: float = Field(25, ge=0, le=90, alias="MAX_ANGLE")
    min_brightness: float = Field(0.3, ge=0, le=1, alias="MIN_BRIGHTNESS")
    min_face_score: float = Field(0.3, ge=0, le=1, alias="MIN_FACE_SCORE")
    max_detection_distance: float = Field(0.7, ge=0, le=2, alias="MAX_DETECTION_DISTANCE")
    min_landmarks_visibility: float = Field(0, ge=0, le=1, alias="MIN_LANDMARKS_VISIBILITY")
    late_threshold_hour: int = Field(9, ge=0, le=23, alias="LATE_THRESHOLD_HOUR")
    late_threshold_minute: int = Field(0, ge=0, le=59, alias="LATE_THRESHOLD_MINUTE")

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True)

    def merged(self, overrides: dict) -> "DetectionSettings":
        fields = DetectionSettings.model_fields
        aliased = {
            fields[key].alias if key in fields else key: value
            for key, value in overrides.items()
        }
        return DetectionSettings.model_validate({**self.to_json(), **aliased})

    @classmethod
    def unknown_keys(cls, changes: dict) -> list[str]:
        known = {*cls.model_fields, *(field.alias for field in cls.model_fields.values())}
        return sorted(set(changes) - known)
