from datetime import datetime, timedelta

import numpy as np
import pytest

from domain.model import (
    AttendanceRecord,
    BoundingBox,
    DetectionResult,
    DetectionSettings,
    Employee,
    FaceLandmarks,
)
from domain.repository import AttendanceRepository, EmployeeRepository, SettingsRepository
from domain.service import HumanFaceDetection, ReferenceImageStorage, VideoSource

FRAME_WIDTH = 640
FRAME_HEIGHT = 480


def make_descriptor(*values, size: int = 128) -> list[float]:
    """A descriptor that is zero except for its first few components."""
    descriptor = [0.0] * size
    for index, value in enumerate(values):
        descriptor[index] = value
    return descriptor


def make_landmarks(x: int, y: int, size: int, roll: float = 0.0, jaw_points: int = 17) -> FaceLandmarks:
    cx, cy = x + size / 2, y + size / 2
    eye_dx = size / 5
    eye_dy = np.tan(np.radians(roll)) * 2 * eye_dx

    def eye(center_x, center_y):
        return [(center_x + dx, center_y + dy) for dx, dy in [(-6, 0), (-3, -2), (3, -2), (6, 0), (3, 2), (-3, 2)]]

    return FaceLandmarks(
        jaw_outline=[(x + size * i / 16, y + size * 0.9) for i in range(jaw_points)],
        left_eyebrow=[(cx - eye_dx + i, cy - size / 4) for i in range(-4, 5, 2)],
        right_eyebrow=[(cx + eye_dx + i, cy - size / 4) for i in range(-4, 5, 2)],
        nose=[(cx, cy - size / 10 + i * 4) for i in range(9)],
        left_eye=eye(cx - eye_dx, cy - size / 6 - eye_dy / 2),
        right_eye=eye(cx + eye_dx, cy - size / 6 + eye_dy / 2),
        mouth=[(cx + i * 4, cy + size / 4) for i in range(-5, 6)],
    )


def make_detection(
    x: int = 200,
    y: int = 120,
    size: int = 160,
    score: float = 0.9,
    descriptor: list[float] | None = None,
    roll: float = 0.0,
    jaw_points: int = 17,
    landmarks: FaceLandmarks | None = None,
) -> DetectionResult:
    return DetectionResult(
        bounding_boxes=BoundingBox(x=x, y=y, width=size, height=size, score=score),
        landmarks=landmarks or make_landmarks(x, y, size, roll=roll, jaw_points=jaw_points),
        descriptor=descriptor if descriptor is not None else make_descriptor(),
    )


def make_frame(value: int = 128) -> np.ndarray:
    return np.full((FRAME_HEIGHT, FRAME_WIDTH, 3), value, dtype=np.uint8)


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self, employees: list[Employee] | None = None, fail: bool = False):
        self.employees = {employee.employee_id: employee for employee in employees or []}
        self.fail = fail

    def add_employee(self, employee: Employee) -> dict:
        self.employees[employee.employee_id] = employee
        return {"success": True, "employee_id": employee.employee_id}

    def get_employee_by_id(self, employee_id: str) -> Employee | None:
        return self.employees.get(employee_id)

    def get_all_employees(self) -> list[Employee]:
        if self.fail:
            raise ConnectionError("employee store offline")
        return list(self.employees.values())


class InMemoryAttendanceRepository(AttendanceRepository):
    def __init__(self):
        self.records: list[AttendanceRecord] = []
        self.fail = False
        self.lose_race = False

    def get_attendance_by_employee_in_range(self, employee_id, start, end):
        if self.fail:
            raise ConnectionError("attendance store offline")
        return [
            record for record in self.records
            if record.employee_id == employee_id and start <= record.check_date < end
        ]

    def add_attendance(self, record):
        if self.fail:
            raise ConnectionError("attendance store offline")
        if self.lose_race:
            return None
        self.records.append(record)
        return record

    def get_attendance_in_range(self, start, end):
        return [record for record in self.records if start <= record.check_date < end]


class InMemorySettingsRepository(SettingsRepository):
    def __init__(self, settings: DetectionSettings | None = None):
        self.settings = settings or DetectionSettings()
        self.saved = 0

    def get_settings(self) -> DetectionSettings:
        return self.settings

    def save_settings(self, settings: DetectionSettings) -> bool:
        self.settings = settings
        self.saved += 1
        return True

    def reset_settings(self) -> DetectionSettings:
        self.settings = DetectionSettings()
        return self.settings


class FakeFaceDetection(HumanFaceDetection):
    """Returns the detections it was given, one per call; the last one repeats."""

    def __init__(self, detections=None, load_error: Exception | None = None, predict_error: Exception | None = None):
        self.detections = list(detections or [])
        self.load_error = load_error
        self.predict_error = predict_error
        self.loaded = False
        self.calls = 0

    def load(self) -> None:
        if self.load_error is not None:
            raise self.load_error
        self.loaded = True

    def predict(self, image, min_confidence: float = 0.5):
        self.calls += 1
        if self.predict_error is not None:
            raise self.predict_error
        if not self.detections:
            return None
        if len(self.detections) > 1:
            return self.detections.pop(0)
        return self.detections[0]


class FakeVideoSource(VideoSource):
    def __init__(self, frames=None, repeat: bool = True, open_error: Exception | None = None):
        self.frames = list(frames) if frames is not None else [make_frame()]
        self.repeat = repeat
        self.open_error = open_error
        self.opened = False
        self.released = False
        self.reads = 0
        self.device = None

    def list_devices(self) -> list[int]:
        return [0]

    def open(self, device=None) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.device = device
        self.opened = True

    def read(self):
        self.reads += 1
        if not self.frames:
            return None
        if self.repeat and len(self.frames) == 1:
            return self.frames[0]
        return self.frames.pop(0)

    def is_opened(self) -> bool:
        return self.opened

    def release(self) -> None:
        self.opened = False
        self.released = True


class FakeImageStorage(ReferenceImageStorage):
    def __init__(self, images: dict | None = None, errors: dict | None = None):
        self.images = images or {}
        self.errors = errors or {}
        self.fetched = []

    def fetch_image(self, reference):
        self.fetched.append(reference)
        if reference in self.errors:
            raise self.errors[reference]
        return self.images.get(reference)


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, amount):
        self.now = self.now + amount


@pytest.fixture
def settings():
    return DetectionSettings()


@pytest.fixture
def attendance_repository():
    return InMemoryAttendanceRepository()


@pytest.fixture
def settings_repository():
    return InMemorySettingsRepository()


@pytest.fixture
def morning_clock():
    return FakeClock(datetime(2026, 10, 19, 8, 30))


@pytest.fixture
def one_day():
    return timedelta(days=1)
