import numpy as np
from attrs import define, field, validators

from domain.model import DESCRIPTOR_SIZE, DetectionSettings, Employee, GalleryEntry
from domain.repository import EmployeeRepository
from domain.service import HumanFaceDetection, ReferenceImageStorage
from utils import get_logger

logger = get_logger(__name__)


@define
class BuildDescriptorGallery:
    employee_repository: EmployeeRepository = field(
        validator=validators.instance_of(EmployeeRepository)
    )
    human_face_detection: HumanFaceDetection = field(
        validator=validators.instance_of(HumanFaceDetection)
    )
    reference_image_storage: ReferenceImageStorage = field(
        validator=validators.instance_of(ReferenceImageStorage)
    )
    settings: DetectionSettings = field(
        factory=DetectionSettings,
        validator=validators.instance_of(DetectionSettings),
    )
    descriptor_size: int = DESCRIPTOR_SIZE

    def invoke(self) -> dict[str, GalleryEntry]:
        try:
            employees = self.employee_repository.get_all_employees()
        except Exception as e:
            logger.error(f"Error fetching employees for the gallery: {e}")
            return {}

        gallery: dict[str, GalleryEntry] = {}
        for employee in employees:
            descriptors = self._precomputed_descriptors(employee)
            if not descriptors:
                descriptors = self._descriptors_from_images(employee)

            if not descriptors:
                logger.warning(
                    "No usable face for %s (%s); skipping", employee.name, employee.employee_id
                )
                continue

            gallery[employee.employee_id] = GalleryEntry(name=employee.name, descriptors=descriptors)
            logger.info("Loaded %d descriptor(s) for %s", len(descriptors), employee.name)

        logger.info(
            "Descriptor gallery ready: %d employee(s), %d descriptor(s)",
            len(gallery),
            sum(len(entry.descriptors) for entry in gallery.values()),
        )
        return gallery

    def _precomputed_descriptors(self, employee: Employee) -> list[np.ndarray]:
        if employee.avatar_descriptor is None:
            return []
        if len(employee.avatar_descriptor) != self.descriptor_size:
            logger.warning(
                "Invalid descriptor for %s: expected %d values, got %d",
                employee.name,
                self.descriptor_size,
                len(employee.avatar_descriptor),
            )
            return []
        return [np.asarray(employee.avatar_descriptor, dtype=np.float32)]

    def _descriptors_from_images(self, employee: Employee) -> list[np.ndarray]:
        references = [ref for ref in [employee.avatar_url, *employee.reference_images] if ref]
        descriptors = []
        for reference in references:
            try:
                image = self.reference_image_storage.fetch_image(reference)
                if image is None:
                    logger.warning("Reference image %s for %s could not be loaded", reference, employee.name)
                    continue
                detection = self.human_face_detection.predict(image, min_confidence=self.settings.min_confidence)
            except Exception as e:
                logger.error(f"Error processing reference image {reference} for {employee.name}: {e}")
                continue

            if detection is None or not detection.descriptor:
                logger.warning("No face detected in %s for %s", reference, employee.name)
                continue
            descriptors.append(detection.descriptor_array())
        return descriptors
