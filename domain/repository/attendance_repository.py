from abc import ABC, abstractmethod
from datetime import datetime

from ..model import AttendanceRecord


class AttendanceRepository(ABC):
    @abstractmethod
    def get_attendance_by_employee_in_range(
        self, employee_id: str, start: datetime, end: datetime
    ) -> list[AttendanceRecord]:
        raise NotImplementedError("Implement get_attendance_by_employee_in_range method")

    @abstractmethod
    def add_attendance(self, record: AttendanceRecord) -> AttendanceRecord | None:
        """Store ``record``; return None when the employee already has a record that day."""
        raise NotImplementedError("Implement add_attendance method")

    @abstractmethod
    def get_attendance_in_range(self, start: datetime, end: datetime) -> list[AttendanceRecord]:
        raise NotImplementedError("Implement get_attendance_in_range method")
