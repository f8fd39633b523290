import uuid

from pydantic import BaseModel, Field


class Employee(BaseModel):
    employee_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    avatar_url: str | None = None
    avatar_descriptor: list[float] | None = None
    reference_images: list[str] = Field(default_factory=list)

    def to_json(self):
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "avatar_url": self.avatar_url,
            "has_descriptor": self.avatar_descriptor is not None,
            "reference_images": list(self.reference_images),
        }
