from .get_all_employees import GetAllEmployees
from .get_daily_attendance import GetDailyAttendance
from .get_detection_settings import GetDetectionSettings

__all__ = [
    "GetAllEmployees",
    "GetDailyAttendance",
    "GetDetectionSettings",
]
