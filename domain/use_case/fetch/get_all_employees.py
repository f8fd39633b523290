from attrs import define, field, validators
from domain.model import Employee
from domain.repository import EmployeeRepository
from typing import List

from utils import get_logger

logger = get_logger(__name__)

@define
class GetAllEmployees:
    employee_repository: EmployeeRepository = field(
        validator=validators.instance_of(EmployeeRepository)
    )

    def invoke(self) -> List[Employee]:
        try:
            employees = self.employee_repository.get_all_employees()
            logger.info(f"Retrieved {len(employees)} employees")
            return employees
        except Exception as e:
            logger.error(f"Error retrieving employees: {e}")
            return []
