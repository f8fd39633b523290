from .employee_repository import EmployeeRepository
from .attendance_repository import AttendanceRepository
from .settings_repository import SettingsRepository

__all__ = [
    "EmployeeRepository",
    "AttendanceRepository",
    "SettingsRepository",
]
