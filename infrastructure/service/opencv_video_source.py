import cv2
import numpy as np

from domain.exceptions import CameraAccessError
from domain.service import VideoSource
from utils import get_logger

logger = get_logger(__name__)


class OpenCVVideoSource(VideoSource):
    """Webcam capture through OpenCV.

    With no explicit device the last detected camera is preferred, since that
    is usually the external webcam, and the default camera is the fallback.
    """

    def __init__(
        self,
        width: int = 1280,
        height: int = 720,
        fps: int = 10,
        max_probe: int = 5,
    ):
        self.width = width
        self.height = height
        self.fps = fps
        self.max_probe = max_probe
        self._capture: cv2.VideoCapture | None = None

    def list_devices(self) -> list[int]:
        devices = []
        for index in range(self.max_probe):
            capture = cv2.VideoCapture(index)
            if capture.isOpened():
                devices.append(index)
            capture.release()
        logger.info(f"Available video devices: {devices}")
        return devices

    def open(self, device: int | str | None = None) -> None:
        if device is None:
            devices = self.list_devices()
            device = devices[-1] if len(devices) > 1 else 0

        self._capture = self._open_capture(device)
        if self._capture is None and device != 0:
            logger.warning(f"Camera {device} unavailable, falling back to the default camera")
            self._capture = self._open_capture(0)
        if self._capture is None:
            raise CameraAccessError(f"Unable to open camera {device}")

    def read(self) -> np.ndarray | None:
        if self._capture is None:
            return None
        ret, frame = self._capture.read()
        if not ret:
            return None
        return frame

    def is_opened(self) -> bool:
        return self._capture is not None and self._capture.isOpened()

    def release(self) -> None:
        if self._capture is not None:
            self._capture.release()
            self._capture = None

    def _open_capture(self, device: int | str) -> cv2.VideoCapture | None:
        capture = cv2.VideoCapture(device)
        if not capture.isOpened():
            capture.release()
            return None
        if isinstance(device, int):
            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
            capture.set(cv2.CAP_PROP_FPS, self.fps)
        logger.info(
            "Opened camera %s at %dx%d",
            device,
            int(capture.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT)),
        )
        return capture
