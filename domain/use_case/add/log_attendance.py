from datetime import datetime, timedelta
from typing import Callable

from attrs import define, field, validators

from domain.exceptions import AttendanceStoreError
from domain.model import AttendanceRecord, AttendanceStatus, DetectionSettings
from domain.repository import AttendanceRepository
from utils import get_logger

logger = get_logger(__name__)


def lateness_minutes(now: datetime, hour: int, minute: int) -> int:
    """Whole minutes elapsed since ``hour:minute`` on the day of ``now``, 0 before it."""
    start_time = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if now <= start_time:
        return 0
    return int((now - start_time) // timedelta(minutes=1))


@define
class LogAttendance:
    """Writes at most one attendance record per employee per calendar day."""

    attendance_repository: AttendanceRepository = field(
        validator=validators.instance_of(AttendanceRepository)
    )
    settings: DetectionSettings = field(
        factory=DetectionSettings,
        validator=validators.instance_of(DetectionSettings),
    )
    clock: Callable[[], datetime] = datetime.now

    def invoke(self, employee_id: str, confidence: float | None = None) -> bool:
        now = self.clock()
        today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)

        try:
            existing = self.attendance_repository.get_attendance_by_employee_in_range(
                employee_id, today, tomorrow
            )
        except Exception as e:
            logger.error(f"Error checking attendance for {employee_id}: {e}")
            raise AttendanceStoreError(f"Error checking attendance: {e}") from e

        if existing:
            logger.info(f"Attendance already logged for {employee_id}")
            return False

        lateness = lateness_minutes(
            now, self.settings.late_threshold_hour, self.settings.late_threshold_minute
        )
        record = AttendanceRecord(
            employee_id=employee_id,
            check_date=now,
            status=AttendanceStatus.LATE if lateness > 0 else AttendanceStatus.PRESENT,
            lateness_minutes=lateness,
            confidence=confidence,
        )

        try:
            stored = self.attendance_repository.add_attendance(record)
        except Exception as e:
            logger.error(f"Error inserting attendance for {employee_id}: {e}")
            raise AttendanceStoreError(f"Error inserting attendance: {e}") from e

        if stored is None:
            logger.info(f"Attendance for {employee_id} was logged concurrently; skipping")
            return False

        logger.info(
            "Logged attendance for %s at %s (%s, lateness %s)",
            employee_id,
            now.strftime("%Y-%m-%d %H:%M:%S"),
            record.status.value,
            record.lateness or "none",
        )
        return True
