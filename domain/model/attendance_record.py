import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from .attendance_status import AttendanceStatus


class AttendanceRecord(BaseModel):
    attendance_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    employee_id: str
    check_date: datetime
    status: AttendanceStatus = AttendanceStatus.PRESENT
    lateness_minutes: int = 0
    confidence: float | None = None

    @property
    def lateness(self) -> str | None:
        if self.lateness_minutes > 0:
            return f"{self.lateness_minutes} minutes"
        return None

    def to_json(self):
        return {
            "attendance_id": self.attendance_id,
            "employee_id": self.employee_id,
            "check_date": self.check_date.isoformat(),
            "status": self.status.value,
            "lateness": self.lateness,
            "confidence": self.confidence,
        }
