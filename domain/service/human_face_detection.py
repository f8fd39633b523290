from abc import ABC, abstractmethod

import numpy as np
from domain.model import DetectionResult


class HumanFaceDetection(ABC):
    @abstractmethod
    def load(self) -> None:
        raise NotImplementedError("Implement load method")

    @abstractmethod
    def predict(self, image: np.ndarray, min_confidence: float = 0.5) -> DetectionResult | None:
        raise NotImplementedError("Implement predict method")
