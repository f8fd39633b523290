import math
from pathlib import Path
from typing import Iterable, Sequence

import cv2
import numpy as np


RED = (0, 0, 255)
GREEN = (0, 255, 0)
YELLOW = (0, 255, 255)
WHITE = (255, 255, 255)


def euclidean_distance(feat1, feat2) -> float:
    """Euclidean distance between two face descriptors.

    Args:
        feat1 (ndarray): First descriptor.
        feat2 (ndarray): Second descriptor, same length as ``feat1``.

    Returns:
        float: The L2 distance, always >= 0.
    """
    feat1 = np.asarray(feat1, dtype=np.float32).ravel()
    feat2 = np.asarray(feat2, dtype=np.float32).ravel()
    if feat1.shape != feat2.shape:
        raise ValueError(f"Descriptor shapes differ: {feat1.shape} != {feat2.shape}")
    return float(np.linalg.norm(feat1 - feat2))


def centroid(points: Iterable[Sequence[float]]) -> tuple[float, float]:
    points = list(points)
    if not points:
        raise ValueError("Cannot take the centroid of no points")
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return sum(xs) / len(xs), sum(ys) / len(ys)


def eye_roll_angle(left_eye, right_eye) -> float:
    """Absolute roll angle in degrees of the line joining both eye centroids."""
    left_x, left_y = centroid(left_eye)
    right_x, right_y = centroid(right_eye)
    return abs(math.degrees(math.atan2(right_y - left_y, right_x - left_x)))


def face_brightness(frame: np.ndarray, crop_rect: tuple[int, int, int, int]) -> float | None:
    """Mean intensity of the face crop scaled to [0, 1], or None for an empty crop."""
    if frame is None or frame.size == 0:
        return None
    height, width = frame.shape[:2]
    x1, y1, x2, y2 = crop_rect
    x1, y1 = max(x1, 0), max(y1, 0)
    x2, y2 = min(x2, width), min(y2, height)
    if x1 >= x2 or y1 >= y2:
        return None
    crop = frame[y1:y2, x1:x2]
    if crop.ndim == 3:
        crop = cv2.cvtColor(crop, cv2.COLOR_BGR2GRAY)
    return float(np.mean(crop)) / 255.0


def decode_image_bytes(data: bytes) -> np.ndarray | None:
    if not data:
        return None
    np_arr = np.frombuffer(data, np.uint8)
    return cv2.imdecode(np_arr, cv2.IMREAD_COLOR)


def load_image(path: str | Path) -> np.ndarray | None:
    path = Path(path)
    if not path.is_file():
        return None
    return decode_image_bytes(path.read_bytes())


def clear_overlay(frame: np.ndarray) -> np.ndarray:
    return frame.copy()


def draw_bbox_info(frame, bbox, label: str, color=GREEN, landmarks: Iterable[Sequence[float]] = ()):
    """Draw a face box with a label above it, and the landmark points if given."""
    x1, y1, x2, y2 = bbox
    cv2.rectangle(frame, (int(x1), int(y1)), (int(x2), int(y2)), color, 2)
    for px, py in landmarks:
        cv2.circle(frame, (int(px), int(py)), 1, color, -1)

    (text_width, text_height), baseline = cv2.getTextSize(label, cv2.FONT_HERSHEY_SIMPLEX, 0.6, 2)
    top = max(int(y1) - text_height - baseline - 10, 0)
    cv2.rectangle(frame, (int(x1), top), (int(x1) + text_width + 10, top + text_height + baseline + 10), color, -1)
    cv2.putText(
        frame,
        label,
        (int(x1) + 5, top + text_height + 5),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.6,
        (0, 0, 0),
        2,
    )
    return frame


def draw_banner(frame, text: str, color=YELLOW, corner: str = "top-right"):
    (text_width, text_height), baseline = cv2.getTextSize(text, cv2.FONT_HERSHEY_SIMPLEX, 0.7, 2)
    width = frame.shape[1]
    x = width - text_width - 25 if corner == "top-right" else 15
    y = 20
    cv2.rectangle(frame, (x - 10, y - 5), (x + text_width + 10, y + text_height + baseline + 5), color, -1)
    cv2.putText(frame, text, (x, y + text_height), cv2.FONT_HERSHEY_SIMPLEX, 0.7, WHITE, 2)
    return frame
