from .log_attendance import LogAttendance, lateness_minutes
from .register_employee import RegisterEmployee

__all__ = [
    "LogAttendance",
    "RegisterEmployee",
    "lateness_minutes",
]
