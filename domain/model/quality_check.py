from pydantic import BaseModel


class QualityCheck(BaseModel):
    is_valid: bool
    reason: str | None = None
