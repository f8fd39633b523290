import numpy as np
from attrs import define, field, validators

from domain.model import DetectionResult, DetectionSettings, FrameSize, QualityCheck
from utils import get_logger
from utils.helpers import eye_roll_angle, face_brightness

logger = get_logger(__name__)

MAX_JAW_ASYMMETRY = 0.2
JAW_SPLIT = 8


@define
class CheckFaceQuality:
    """Rejects detections that are unusable for matching.

    Checks run in a fixed order and the first failure wins: detection score,
    face size, nose visibility, eye roll angle, jaw symmetry and, when a frame
    is given, brightness of the face crop.
    """

    settings: DetectionSettings = field(
        validator=validators.instance_of(DetectionSettings)
    )

    def invoke(
        self,
        detection: DetectionResult,
        frame_size: FrameSize,
        frame: np.ndarray | None = None,
    ) -> QualityCheck:
        box = detection.bounding_boxes
        landmarks = detection.landmarks

        if box.score < self.settings.min_face_score:
            return self._reject("low detection confidence", score=box.score)

        if box.width < self.settings.min_face_size or box.height < self.settings.min_face_size:
            return self._reject("face too small or too far", width=box.width, height=box.height)

        nose = landmarks.nose
        visible = [
            (x, y) for x, y in nose
            if 0 <= x <= frame_size.width and 0 <= y <= frame_size.height
        ]
        visibility_ratio = len(visible) / len(nose) if nose else 0.0
        if visibility_ratio < self.settings.min_landmarks_visibility:
            return self._reject("face partially covered", visibility=visibility_ratio)

        if not landmarks.left_eye or not landmarks.right_eye:
            return self._reject("face not aligned properly", angle=None)
        angle = eye_roll_angle(landmarks.left_eye, landmarks.right_eye)
        if angle > self.settings.max_angle:
            return self._reject("face not aligned properly", angle=angle)

        left_side = landmarks.jaw_outline[:JAW_SPLIT]
        right_side = landmarks.jaw_outline[JAW_SPLIT:]
        if not left_side:
            return self._reject("face partially visible", symmetry=None)
        symmetry_ratio = abs(len(left_side) - len(right_side)) / len(left_side)
        if symmetry_ratio > MAX_JAW_ASYMMETRY:
            return self._reject("face partially visible", symmetry=symmetry_ratio)

        if frame is not None and self.settings.min_brightness > 0:
            brightness = face_brightness(frame, box.crop_rect)
            if brightness is not None and brightness < self.settings.min_brightness:
                return self._reject("face too dark", brightness=brightness)

        return QualityCheck(is_valid=True)

    @staticmethod
    def _reject(reason: str, **details) -> QualityCheck:
        logger.debug("Failed quality check: %s %s", reason, details)
        return QualityCheck(is_valid=False, reason=reason)
