from .update_detection_settings import UpdateDetectionSettings

__all__ = [
    "UpdateDetectionSettings",
]
