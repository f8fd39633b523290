from datetime import date, datetime, time, timedelta
from attrs import define, field, validators
from domain.model import AttendanceRecord
from domain.repository import AttendanceRepository

from utils import get_logger

logger = get_logger(__name__)


@define
class GetDailyAttendance:
    attendance_repository: AttendanceRepository = field(
        validator=validators.instance_of(AttendanceRepository)
    )

    def invoke(self, day: date | None = None) -> list[AttendanceRecord]:
        start = datetime.combine(day or date.today(), time.min)
        end = start + timedelta(days=1)
        try:
            records = self.attendance_repository.get_attendance_in_range(start, end)
            logger.info(f"Retrieved {len(records)} attendance records for {start.date()}")
            return records
        except Exception as e:
            logger.error(f"Error retrieving attendance records: {e}")
            return []
