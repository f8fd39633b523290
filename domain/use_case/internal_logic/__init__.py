from .check_face_quality import CheckFaceQuality
from .build_descriptor_gallery import BuildDescriptorGallery
from .match_face import MatchFace
from .update_consecutive_detections import UpdateConsecutiveDetections, DETECTION_TIMEOUT_MS

__all__ = [
    "CheckFaceQuality",
    "BuildDescriptorGallery",
    "MatchFace",
    "UpdateConsecutiveDetections",
    "DETECTION_TIMEOUT_MS",
]
