from functools import cached_property

from environs import Env

from domain.repository import AttendanceRepository, EmployeeRepository, SettingsRepository
from infrastructure.repository import (
    JsonSettingsRepository,
    SqliteAttendanceRepository,
    SqliteEmployeeRepository,
)


class Repository:
    def __init__(self, env: Env | None = None):
        if env is None:
            env = Env()
            env.read_env()
        self._database_path = env.str("DATABASE_PATH", "attendance.db")
        self._settings_path = env.str("SETTINGS_PATH", "face_detection_settings.json")

    @cached_property
    def employee_repository(self) -> EmployeeRepository:
        return SqliteEmployeeRepository(self._database_path)

    @cached_property
    def attendance_repository(self) -> AttendanceRepository:
        return SqliteAttendanceRepository(self._database_path)

    @cached_property
    def settings_repository(self) -> SettingsRepository:
        return JsonSettingsRepository(self._settings_path)
