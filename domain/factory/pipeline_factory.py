from typing import Callable

from environs import Env

from di.repository import Repository
from di.service import Service
from domain.model import DetectionSettings
from domain.use_case.add import LogAttendance
from domain.use_case.fetch import GetDetectionSettings
from domain.use_case.internal_logic import (
    BuildDescriptorGallery,
    CheckFaceQuality,
    MatchFace,
    UpdateConsecutiveDetections,
)

from ..pipelines import FaceCheckInPipeline


class PipelineFactory:
    def __init__(
        self,
        is_debugging: bool = False,
        service: Service | None = None,
        repository: Repository | None = None,
    ):
        env = Env()
        env.read_env()
        self._is_debugging = is_debugging
        self._settle_delay = env.float("COMMIT_SETTLE_DELAY", 0.5)
        self._service = service or Service(env)
        self._repository = repository or Repository(env)

    def get_settings(self, overrides: dict | None = None) -> DetectionSettings:
        return GetDetectionSettings(
            settings_repository=self._repository.settings_repository,
        ).invoke(overrides)

    def get_pipeline(
        self,
        settings: DetectionSettings | None = None,
        camera_device: int | str | None = None,
        on_frame: Callable | None = None,
    ) -> FaceCheckInPipeline:
        settings = settings or self.get_settings()
        service = self._service
        repository = self._repository

        return FaceCheckInPipeline(
            face_detection=service.human_face_detection,
            video_source=service.video_source,
            build_descriptor_gallery=BuildDescriptorGallery(
                employee_repository=repository.employee_repository,
                human_face_detection=service.human_face_detection,
                reference_image_storage=service.reference_image_storage,
                settings=settings,
            ),
            check_face_quality=CheckFaceQuality(settings=settings),
            match_face=MatchFace(settings=settings),
            update_consecutive_detections=UpdateConsecutiveDetections(settings=settings),
            log_attendance=LogAttendance(
                attendance_repository=repository.attendance_repository,
                settings=settings,
            ),
            settings=settings,
            camera_device=camera_device,
            settle_delay=self._settle_delay,
            is_debugging=self._is_debugging,
            on_frame=on_frame,
        )
