from abc import ABC, abstractmethod

import numpy as np


class ReferenceImageStorage(ABC):
    @abstractmethod
    def fetch_image(self, reference: str) -> np.ndarray | None:
        raise NotImplementedError("Implement fetch_image method")
