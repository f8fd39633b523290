import threading
import time
from typing import Callable

import numpy as np
from pydantic import BaseModel, ConfigDict, InstanceOf, PrivateAttr

from domain.exceptions import (
    AttendanceStoreError,
    CameraAccessError,
    ModelLoadError,
    SessionInitializationError,
)
from domain.model import (
    DetectionResult,
    DetectionSession,
    DetectionSettings,
    FrameSize,
    MatchResult,
    RecognitionEvent,
    SessionStatus,
)
from domain.service import HumanFaceDetection, VideoSource
from domain.use_case.add import LogAttendance
from domain.use_case.internal_logic import (
    BuildDescriptorGallery,
    CheckFaceQuality,
    MatchFace,
    UpdateConsecutiveDetections,
)
from utils import get_logger
from utils.helpers import GREEN, RED, YELLOW, clear_overlay, draw_banner, draw_bbox_info

from .pipeline import Pipeline

logger = get_logger(__name__)


class FaceCheckInPipeline(BaseModel, Pipeline):
    """Fixed-interval detection loop that checks employees in from a camera.

    Each tick reads one frame, gates it on quality, matches it against the
    session gallery and, once the identity is confirmed over consecutive
    frames, logs attendance. A tick that arrives while an attendance write is
    still being committed is dropped.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    face_detection: InstanceOf[HumanFaceDetection]
    video_source: InstanceOf[VideoSource]
    build_descriptor_gallery: InstanceOf[BuildDescriptorGallery]
    check_face_quality: InstanceOf[CheckFaceQuality]
    match_face: InstanceOf[MatchFace]
    update_consecutive_detections: InstanceOf[UpdateConsecutiveDetections]
    log_attendance: InstanceOf[LogAttendance]
    settings: DetectionSettings
    camera_device: int | str | None = None
    commit_in_background: bool = True
    settle_delay: float = 0.5
    max_read_failures: int = 50
    is_debugging: bool = False
    on_frame: Callable[[np.ndarray], None] | None = None

    _stop_event: threading.Event = PrivateAttr(default_factory=threading.Event)
    _commit_thread: threading.Thread | None = PrivateAttr(default=None)

    def start(self) -> DetectionSession:
        session = DetectionSession(status=SessionStatus.LOADING)
        self._stop_event.clear()
        logger.info("Starting check-in session")

        try:
            try:
                self.face_detection.load()
            except Exception as exc:
                raise ModelLoadError(f"Failed to load face models: {exc}") from exc

            try:
                self.video_source.open(self.camera_device)
            except CameraAccessError:
                raise
            except Exception as exc:
                raise CameraAccessError(f"Failed to open camera: {exc}") from exc
            if not self.video_source.is_opened():
                raise CameraAccessError("Camera could not be opened")

            try:
                session.gallery = self.build_descriptor_gallery.invoke()
            except Exception as exc:
                raise SessionInitializationError(f"Failed to build descriptor gallery: {exc}") from exc
        except SessionInitializationError as exc:
            logger.error(exc)
            session.status = SessionStatus.FAILED
            session.errors.append(str(exc))
            self.video_source.release()
            raise

        if not session.gallery:
            logger.warning("Descriptor gallery is empty; every face will be unknown")
        session.status = SessionStatus.RUNNING
        logger.info("Check-in session running with %d known employee(s)", len(session.gallery))
        return session

    def process(self, session: DetectionSession | None = None, max_ticks: int | None = None) -> DetectionSession:
        if session is None:
            session = self.start()

        interval = self.settings.detection_interval / 1000
        ticks = 0
        read_failures = 0
        try:
            while not self._stop_event.is_set():
                if max_ticks is not None and ticks >= max_ticks:
                    break
                started = time.monotonic()
                try:
                    if self.tick(session):
                        read_failures = 0
                    else:
                        read_failures += 1
                except Exception:
                    logger.exception("Error during face detection")
                ticks += 1

                if read_failures >= self.max_read_failures:
                    logger.error("No frames received from the camera; stopping session")
                    session.errors.append("Video stream ended")
                    break

                remaining = interval - (time.monotonic() - started)
                if remaining > 0:
                    self._stop_event.wait(remaining)
        finally:
            self.teardown(session)
        return session

    def stop(self) -> None:
        self._stop_event.set()

    def teardown(self, session: DetectionSession) -> None:
        if self._commit_thread is not None and self._commit_thread.is_alive():
            self._commit_thread.join(timeout=self.settle_delay + 5)
        self.video_source.release()
        logger.info("Released the video resource.")
        if session.status != SessionStatus.FAILED:
            session.status = SessionStatus.STOPPED

    def tick(self, session: DetectionSession) -> bool:
        """Run one detection step. Returns False when no frame could be read."""
        if session.is_processing:
            session.dropped_ticks += 1
            return True

        frame = self.video_source.read()
        if frame is None:
            session.overlay = None
            return False

        session.frame_count += 1
        overlay = clear_overlay(frame)

        detection = self.face_detection.predict(frame, min_confidence=self.settings.min_confidence)
        if detection is None:
            self._publish(session, overlay)
            return True

        box = detection.bounding_boxes
        landmarks = detection.landmarks.points if self.is_debugging else ()
        quality = self.check_face_quality.invoke(detection, FrameSize.of(frame), frame)
        if not quality.is_valid:
            session.last_rejection = quality.reason
            draw_bbox_info(overlay, box.crop_rect, quality.reason, RED, landmarks)
            self._publish(session, overlay)
            return True
        session.last_rejection = None

        match = self.match_face.invoke(detection.descriptor, session.gallery)
        if not match.is_unknown and match.confidence > self.settings.recognition_threshold:
            label = f"{match.name or match.label} ({match.confidence * 100:.1f}%)"
            draw_bbox_info(overlay, box.crop_rect, label, GREEN, landmarks)
            confirmed = self.update_consecutive_detections.invoke(
                session.consecutive_detections, match.label, match
            )
            if confirmed:
                self._commit(session, match, detection)
        else:
            draw_bbox_info(overlay, box.crop_rect, "Unknown Person", YELLOW, landmarks)

        self._publish(session, overlay)
        return True

    def _commit(self, session: DetectionSession, match: MatchResult, detection: DetectionResult) -> None:
        if not session.try_begin_processing():
            return
        if self.commit_in_background:
            self._commit_thread = threading.Thread(
                target=self._record_attendance,
                args=(session, match, detection),
                daemon=True,
            )
            self._commit_thread.start()
        else:
            self._record_attendance(session, match, detection)

    def _record_attendance(self, session: DetectionSession, match: MatchResult, detection: DetectionResult) -> None:
        try:
            logged = self.log_attendance.invoke(match.label, match.confidence)
            session.store_available = True
            if logged:
                session.recognized.append(
                    RecognitionEvent(
                        employee_id=match.label,
                        name=match.name,
                        confidence=match.confidence,
                        face_box=detection.bounding_boxes,
                    )
                )
                logger.info("Checked in %s (%.1f%%)", match.name or match.label, match.confidence * 100)
            else:
                logger.info("Attendance logging skipped for %s (already logged today)", match.label)
        except AttendanceStoreError as exc:
            session.store_available = False
            session.errors.append(str(exc))
            logger.error("Attendance for %s was not recorded: %s", match.label, exc)
        except Exception as exc:
            session.errors.append(f"Attendance for {match.label} was not recorded: {exc}")
            logger.exception("Unexpected error while recording attendance for %s", match.label)
        finally:
            if self.settle_delay > 0:
                time.sleep(self.settle_delay)
            session.end_processing()

    def _publish(self, session: DetectionSession, overlay: np.ndarray) -> None:
        if session.is_processing:
            draw_banner(overlay, "Processing...", YELLOW)
        if not session.store_available:
            draw_banner(overlay, "Data store unreachable", RED, corner="top-left")
        session.overlay = overlay
        if self.on_frame is not None:
            self.on_frame(overlay)
