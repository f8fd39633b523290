from .bounding_box import BoundingBox
from .face_landmarks import FaceLandmarks, Point
from .detection_result import DetectionResult
from .frame_size import FrameSize
from .quality_check import QualityCheck
from .employee import Employee
from .gallery_entry import GalleryEntry
from .match_result import MatchResult, UNKNOWN_LABEL
from .consecutive_detection import ConsecutiveDetection
from .attendance_status import AttendanceStatus
from .attendance_record import AttendanceRecord
from .recognition_event import RecognitionEvent
from .session_status import SessionStatus
from .detection_settings import DetectionSettings, DESCRIPTOR_SIZE
from .detection_session import DetectionSession


__all__ = [
    "BoundingBox",
    "FaceLandmarks",
    "Point",
    "DetectionResult",
    "FrameSize",
    "QualityCheck",
    "Employee",
    "GalleryEntry",
    "MatchResult",
    "UNKNOWN_LABEL",
    "ConsecutiveDetection",
    "AttendanceStatus",
    "AttendanceRecord",
    "RecognitionEvent",
    "SessionStatus",
    "DetectionSettings",
    "DESCRIPTOR_SIZE",
    "DetectionSession",
]
