from .sqlite_attendance_repository import SqliteAttendanceRepository
from .sqlite_employee_repository import SqliteEmployeeRepository
from .json_settings_repository import JsonSettingsRepository

__all__ = [
    "SqliteAttendanceRepository",
    "SqliteEmployeeRepository",
    "JsonSettingsRepository",
]
