from functools import cached_property

from environs import Env

from domain.service import HumanFaceDetection, ReferenceImageStorage, VideoSource
from infrastructure.service import HttpReferenceImageStorage, OpenCVVideoSource


class Service:
    def __init__(self, env: Env | None = None):
        if env is None:
            env = Env()
            env.read_env()
        self._env = env

    @cached_property
    def human_face_detection(self) -> HumanFaceDetection:
        from utils import DlibFaceRecognizer

        return DlibFaceRecognizer(
            model=self._env.str("FACE_DETECTION_MODEL", "hog"),
            upsample=self._env.int("FACE_UPSAMPLE", 1),
        )

    @cached_property
    def reference_image_storage(self) -> ReferenceImageStorage:
        return HttpReferenceImageStorage(
            public_base_url=self._env.str("AVATAR_BASE_URL", None),
            timeout=self._env.float("IMAGE_FETCH_TIMEOUT", 10.0),
        )

    @cached_property
    def video_source(self) -> VideoSource:
        return OpenCVVideoSource()
