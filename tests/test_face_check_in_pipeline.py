import numpy as np
import pytest

from domain.exceptions import CameraAccessError, ModelLoadError, SessionInitializationError
from domain.model import DetectionSettings, Employee, SessionStatus
from domain.pipelines import FaceCheckInPipeline
from domain.use_case.add import LogAttendance
from domain.use_case.internal_logic import (
    BuildDescriptorGallery,
    CheckFaceQuality,
    MatchFace,
    UpdateConsecutiveDetections,
)
from tests.conftest import (
    FakeFaceDetection,
    FakeImageStorage,
    FakeVideoSource,
    InMemoryAttendanceRepository,
    InMemoryEmployeeRepository,
    make_descriptor,
    make_detection,
)

ALICE = Employee(employee_id="emp-a", name="Alice", avatar_descriptor=make_descriptor(0.1))


def build_pipeline(
    detections=None,
    video_source=None,
    face_detection=None,
    attendance_repository=None,
    settings=None,
    gallery_class=BuildDescriptorGallery,
    log_attendance_class=LogAttendance,
    **kwargs,
):
    settings = settings or DetectionSettings()
    face_detection = face_detection or FakeFaceDetection(detections or [])
    pipeline = FaceCheckInPipeline(
        face_detection=face_detection,
        video_source=video_source or FakeVideoSource(),
        build_descriptor_gallery=gallery_class(
            employee_repository=InMemoryEmployeeRepository([ALICE]),
            human_face_detection=face_detection,
            reference_image_storage=FakeImageStorage(),
            settings=settings,
        ),
        check_face_quality=CheckFaceQuality(settings=settings),
        match_face=MatchFace(settings=settings),
        update_consecutive_detections=UpdateConsecutiveDetections(settings=settings),
        log_attendance=log_attendance_class(
            attendance_repository=attendance_repository or InMemoryAttendanceRepository(),
            settings=settings,
        ),
        settings=settings,
        commit_in_background=kwargs.pop("commit_in_background", False),
        settle_delay=kwargs.pop("settle_delay", 0),
        **kwargs,
    )
    return pipeline


def test_start_loads_models_and_builds_gallery():
    video_source = FakeVideoSource()
    pipeline = build_pipeline(video_source=video_source, camera_device=2)

    session = pipeline.start()

    assert session.status == SessionStatus.RUNNING
    assert list(session.gallery) == ["emp-a"]
    assert video_source.device == 2


def test_model_load_failure_releases_camera():
    video_source = FakeVideoSource()
    pipeline = build_pipeline(
        video_source=video_source,
        face_detection=FakeFaceDetection(load_error=OSError("weights missing")),
    )

    with pytest.raises(ModelLoadError):
        pipeline.start()
    assert video_source.released
    assert not video_source.opened


def test_camera_failure_is_reported():
    video_source = FakeVideoSource(open_error=CameraAccessError("permission denied"))
    pipeline = build_pipeline(video_source=video_source)

    with pytest.raises(CameraAccessError, match="permission denied"):
        pipeline.start()
    assert video_source.released


def test_unexpected_camera_error_is_wrapped():
    pipeline = build_pipeline(video_source=FakeVideoSource(open_error=OSError("busy")))

    with pytest.raises(CameraAccessError):
        pipeline.start()


def test_confirmed_face_is_checked_in_once():
    attendance = InMemoryAttendanceRepository()
    pipeline = build_pipeline([make_detection(descriptor=make_descriptor(0.15))], attendance_repository=attendance)
    session = pipeline.start()

    for _ in range(4):
        assert pipeline.tick(session)

    assert [record.employee_id for record in attendance.records] == ["emp-a"]
    assert session.total_detections == 1
    assert session.verified_employee_ids == {"emp-a"}
    assert session.recognized[0].confidence == pytest.approx(0.95, abs=1e-6)
    assert not session.is_processing


def test_single_sighting_is_not_enough():
    attendance = InMemoryAttendanceRepository()
    pipeline = build_pipeline([make_detection(descriptor=make_descriptor(0.1))], attendance_repository=attendance)
    session = pipeline.start()

    pipeline.tick(session)

    assert attendance.records == []
    assert session.consecutive_detections["emp-a"].count == 1


def test_unknown_face_is_not_logged():
    attendance = InMemoryAttendanceRepository()
    stranger = make_detection(descriptor=make_descriptor(0.1, 0.8))
    pipeline = build_pipeline([stranger], attendance_repository=attendance)
    session = pipeline.start()

    for _ in range(3):
        pipeline.tick(session)

    assert attendance.records == []
    assert session.consecutive_detections == {}


def test_rejected_face_skips_matching():
    attendance = InMemoryAttendanceRepository()
    pipeline = build_pipeline([make_detection(size=40, descriptor=make_descriptor(0.1))], attendance_repository=attendance)
    session = pipeline.start()

    for _ in range(3):
        pipeline.tick(session)

    assert session.last_rejection == "face too small or too far"
    assert attendance.records == []


def test_tick_is_dropped_while_committing():
    video_source = FakeVideoSource()
    pipeline = build_pipeline([make_detection()], video_source=video_source)
    session = pipeline.start()
    session.try_begin_processing()

    assert pipeline.tick(session) is True
    assert session.dropped_ticks == 1
    assert video_source.reads == 0


def test_store_failure_marks_store_unavailable():
    attendance = InMemoryAttendanceRepository()
    attendance.fail = True
    pipeline = build_pipeline([make_detection(descriptor=make_descriptor(0.1))], attendance_repository=attendance)
    session = pipeline.start()

    pipeline.tick(session)
    pipeline.tick(session)

    assert session.store_available is False
    assert session.errors
    assert session.recognized == []
    assert not session.is_processing


def test_overlay_is_published_every_frame():
    frames = []
    pipeline = build_pipeline([make_detection()], on_frame=frames.append)
    session = pipeline.start()

    pipeline.tick(session)
    pipeline.tick(session)

    assert len(frames) == 2
    assert isinstance(session.overlay, np.ndarray)
    assert frames[-1] is session.overlay


def test_no_frame_reports_read_failure():
    pipeline = build_pipeline([make_detection()], video_source=FakeVideoSource(frames=[]))
    session = pipeline.start()

    assert pipeline.tick(session) is False
    assert session.overlay is None


def test_process_stops_after_max_ticks_and_releases_camera():
    video_source = FakeVideoSource()
    pipeline = build_pipeline([make_detection(descriptor=make_descriptor(0.1))], video_source=video_source)

    session = pipeline.process(max_ticks=3)

    assert session.status == SessionStatus.STOPPED
    assert session.frame_count == 3
    assert video_source.released
    assert session.total_detections == 1


def test_process_stops_when_stream_ends():
    pipeline = build_pipeline(video_source=FakeVideoSource(frames=[]), max_read_failures=2)

    session = pipeline.process()

    assert session.status == SessionStatus.STOPPED
    assert "Video stream ended" in session.errors


def test_stop_ends_the_loop():
    pipeline = build_pipeline([make_detection()])
    pipeline.on_frame = lambda overlay: pipeline.stop()

    session = pipeline.process(max_ticks=100)

    assert session.frame_count == 1


def test_background_commit_is_joined_on_teardown():
    attendance = InMemoryAttendanceRepository()
    pipeline = build_pipeline(
        [make_detection(descriptor=make_descriptor(0.1))],
        attendance_repository=attendance,
        commit_in_background=True,
        settle_delay=0.05,
    )

    session = pipeline.process(max_ticks=2)

    assert len(attendance.records) == 1
    assert not session.is_processing


class UnreadableGallery(BuildDescriptorGallery):
    def invoke(self):
        raise RuntimeError("dlib: unsupported image type")


class BrokenLogAttendance(LogAttendance):
    def invoke(self, employee_id, confidence=None):
        raise KeyError(employee_id)


def test_gallery_failure_releases_camera():
    video_source = FakeVideoSource()
    pipeline = build_pipeline(video_source=video_source, gallery_class=UnreadableGallery)

    with pytest.raises(SessionInitializationError, match="unsupported image type"):
        pipeline.process(max_ticks=1)
    assert video_source.released
    assert not video_source.opened
    assert video_source.reads == 0


def test_unexpected_commit_error_is_logged_and_released():
    pipeline = build_pipeline(
        [make_detection(descriptor=make_descriptor(0.1))],
        log_attendance_class=BrokenLogAttendance,
    )
    session = pipeline.start()

    pipeline.tick(session)
    pipeline.tick(session)

    assert session.recognized == []
    assert any("emp-a" in error for error in session.errors)
    assert not session.is_processing


def test_landmarks_are_drawn_only_when_debugging(monkeypatch):
    drawn = []

    def record_landmarks(frame, bbox, label, color=None, landmarks=()):
        drawn.append(list(landmarks))
        return frame

    monkeypatch.setattr("domain.pipelines.face_check_in_pipeline.draw_bbox_info", record_landmarks)

    for is_debugging in (False, True):
        pipeline = build_pipeline([make_detection()], is_debugging=is_debugging)
        pipeline.tick(pipeline.start())

    assert drawn[0] == []
    assert len(drawn[1]) > 0
