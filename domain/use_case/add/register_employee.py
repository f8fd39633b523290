import uuid
from pathlib import Path

from attrs import define, field, validators

from domain.model import DetectionSettings, Employee
from domain.repository import EmployeeRepository
from domain.service import HumanFaceDetection
from utils import get_logger
from utils.helpers import load_image

logger = get_logger(__name__)


@define
class RegisterEmployee:
    human_face_detection: HumanFaceDetection = field(
        validator=validators.instance_of(HumanFaceDetection)
    )
    employee_repository: EmployeeRepository = field(
        validator=validators.instance_of(EmployeeRepository)
    )
    settings: DetectionSettings = field(
        factory=DetectionSettings,
        validator=validators.instance_of(DetectionSettings),
    )

    def invoke(self, name: str, image_path: str, employee_id: str | None = None) -> dict:
        if not name:
            return {"success": False, "message": "Missing required fields"}

        image = load_image(image_path)
        if image is None:
            logger.error(f"Could not read image {image_path}")
            return {"success": False, "message": f"Could not read image {image_path}"}

        detection = self.human_face_detection.predict(image, min_confidence=self.settings.min_confidence)
        if detection is None or not detection.descriptor:
            logger.error(f"No face detected in {image_path}")
            return {"success": False, "message": "No face detected in image"}

        employee = Employee(
            employee_id=employee_id or str(uuid.uuid4()),
            name=name,
            avatar_url=str(Path(image_path).resolve()),
            avatar_descriptor=detection.descriptor,
        )
        result = self.employee_repository.add_employee(employee=employee)
        if result.get("success") is False:
            return result

        logger.info(f"Employee registered: {employee.name} ({employee.employee_id})")
        return {
            "success": True,
            "message": "Employee registered successfully",
            "employee_id": employee.employee_id,
        }
