import sqlite3
import threading
from datetime import datetime

from domain.model import AttendanceRecord, AttendanceStatus
from domain.repository import AttendanceRepository
from utils import get_logger

logger = get_logger(__name__)


class SqliteAttendanceRepository(AttendanceRepository):
    """Attendance records in SQLite.

    ``check_day`` carries a unique index together with ``employee_id``, so the
    store itself refuses a second record for the same employee and day.
    """

    def __init__(self, db_path: str = "attendance.db"):
        self.db_path = db_path
        self._lock = threading.Lock()
        self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        self._initialize_database()

    def _initialize_database(self):
        with self._lock:
            self.conn.execute("""
                CREATE TABLE IF NOT EXISTS attendance (
                    id TEXT PRIMARY KEY,
                    employee_id TEXT NOT NULL,
                    check_date TEXT NOT NULL,
                    check_day TEXT NOT NULL,
                    status TEXT NOT NULL,
                    lateness_minutes INTEGER NOT NULL DEFAULT 0,
                    lateness TEXT,
                    confidence REAL
                )
            """)
            self.conn.execute("""
                CREATE UNIQUE INDEX IF NOT EXISTS uq_attendance_employee_day
                ON attendance (employee_id, check_day)
            """)
            self.conn.commit()
        logger.info(f"Attendance database initialized at: {self.db_path}")

    def get_attendance_by_employee_in_range(
        self, employee_id: str, start: datetime, end: datetime
    ) -> list[AttendanceRecord]:
        with self._lock:
            rows = self.conn.execute("""
                SELECT id, employee_id, check_date, status, lateness_minutes, confidence
                FROM attendance
                WHERE employee_id = ? AND check_date >= ? AND check_date < ?
                ORDER BY check_date
            """, (employee_id, start.isoformat(), end.isoformat())).fetchall()
        return [self._to_record(row) for row in rows]

    def get_attendance_in_range(self, start: datetime, end: datetime) -> list[AttendanceRecord]:
        with self._lock:
            rows = self.conn.execute("""
                SELECT id, employee_id, check_date, status, lateness_minutes, confidence
                FROM attendance
                WHERE check_date >= ? AND check_date < ?
                ORDER BY check_date
            """, (start.isoformat(), end.isoformat())).fetchall()
        return [self._to_record(row) for row in rows]

    def add_attendance(self, record: AttendanceRecord) -> AttendanceRecord | None:
        with self._lock:
            try:
                self.conn.execute("""
                    INSERT INTO attendance
                        (id, employee_id, check_date, check_day, status, lateness_minutes, lateness, confidence)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """, (
                    record.attendance_id,
                    record.employee_id,
                    record.check_date.isoformat(),
                    record.check_date.date().isoformat(),
                    record.status.value,
                    record.lateness_minutes,
                    record.lateness,
                    record.confidence,
                ))
                self.conn.commit()
            except sqlite3.IntegrityError:
                self.conn.rollback()
                logger.info(
                    "Attendance for %s on %s already exists", record.employee_id, record.check_date.date()
                )
                return None
        return record

    def close(self):
        if self.conn:
            self.conn.close()

    @staticmethod
    def _to_record(row) -> AttendanceRecord:
        attendance_id, employee_id, check_date, status, lateness, confidence = row
        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            check_date=datetime.fromisoformat(check_date),
            status=AttendanceStatus(status),
            lateness_minutes=lateness,
            confidence=confidence,
        )
