from enum import Enum

class AttendanceStatus(str, Enum):
    PRESENT = 'present'
    LATE = 'late'
    ABSENT = 'absent'
