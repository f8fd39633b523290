"""
dlib Face Recognizer
====================
Face detection, 68-point landmarks and 128-d face descriptors through the
``face_recognition`` package (dlib models). Descriptors are compared with
Euclidean distance; 0.6 is the usual same-person boundary.
"""

import math

import cv2
import numpy as np
import face_recognition
from face_recognition import api as face_api

from domain.model import BoundingBox, DetectionResult, FaceLandmarks
from domain.service import HumanFaceDetection
from utils.logger import get_logger

logger = get_logger(__name__)


def _squash(margin: float) -> float:
    # dlib reports an SVM/MMOD margin; map it to (0, 1) so 0.5 is dlib's own cut-off.
    return 1.0 / (1.0 + math.exp(-margin))


class DlibFaceRecognizer(HumanFaceDetection):
    """dlib face engine returning at most one face per image (the highest-scoring one)."""

    def __init__(self, model: str = "hog", upsample: int = 1, num_jitters: int = 1):
        """
        Args:
            model: "hog" (CPU friendly) or "cnn" (more accurate, needs more compute)
            upsample: Times to upsample the image before detection; finds smaller faces
            num_jitters: Re-samples per descriptor; higher is slower but more stable
        """
        if model not in ("hog", "cnn"):
            raise ValueError(f"Unknown face detection model: {model}")
        self.model = model
        self.upsample = upsample
        self.num_jitters = num_jitters
        self._detector = None

    def load(self) -> None:
        try:
            self._detector = face_api.cnn_face_detector if self.model == "cnn" else face_api.face_detector
        except Exception as e:
            raise RuntimeError(f"Failed to load dlib face models: {e}") from e
        logger.info(f"dlib face models loaded ({self.model} detector)")

    def predict(self, image: np.ndarray, min_confidence: float = 0.5) -> DetectionResult | None:
        if self._detector is None:
            self.load()
        if image is None or image.size == 0:
            return None

        rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        candidates = self._detect(rgb)
        candidates = [(rect, score) for rect, score in candidates if score >= min_confidence]
        if not candidates:
            return None

        rect, score = max(candidates, key=lambda candidate: candidate[1])
        height, width = rgb.shape[:2]
        top, right = max(rect.top(), 0), min(rect.right(), width)
        bottom, left = min(rect.bottom(), height), max(rect.left(), 0)
        location = (top, right, bottom, left)

        landmarks = face_recognition.face_landmarks(rgb, [location], model="large")
        encodings = face_recognition.face_encodings(rgb, [location], num_jitters=self.num_jitters)
        if not encodings:
            return None

        return DetectionResult(
            bounding_boxes=BoundingBox(
                x=left,
                y=top,
                width=right - left,
                height=bottom - top,
                score=score,
            ),
            landmarks=self._to_landmarks(landmarks[0] if landmarks else {}),
            descriptor=[float(value) for value in encodings[0]],
        )

    def _detect(self, rgb: np.ndarray) -> list:
        if self.model == "cnn":
            detections = self._detector(rgb, self.upsample)
            return [(d.rect, _squash(d.confidence)) for d in detections]
        rects, scores, _ = self._detector.run(rgb, self.upsample, -1.0)
        return [(rect, _squash(score)) for rect, score in zip(rects, scores)]

    @staticmethod
    def _to_landmarks(points: dict) -> FaceLandmarks:
        return FaceLandmarks(
            jaw_outline=points.get("chin", []),
            left_eyebrow=points.get("left_eyebrow", []),
            right_eyebrow=points.get("right_eyebrow", []),
            nose=[*points.get("nose_bridge", []), *points.get("nose_tip", [])],
            left_eye=points.get("left_eye", []),
            right_eye=points.get("right_eye", []),
            mouth=[*points.get("top_lip", []), *points.get("bottom_lip", [])],
        )
