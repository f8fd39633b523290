import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class GalleryEntry(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    descriptors: list[np.ndarray] = Field(default_factory=list)
