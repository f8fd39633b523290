from abc import ABC, abstractmethod

from ..model import Employee

class EmployeeRepository(ABC):
    @abstractmethod
    def add_employee(self, employee: Employee) -> dict:
        raise NotImplementedError("Implement add_employee method")

    @abstractmethod
    def get_employee_by_id(self, employee_id: str) -> Employee | None:
        raise NotImplementedError("Implement get_employee_by_id method")

    @abstractmethod
    def get_all_employees(self) -> list[Employee]:
        raise NotImplementedError("Implement get_all_employees method")
