from abc import ABC, abstractmethod
from ..model import DetectionSession


class Pipeline(ABC):
    @abstractmethod
    def process(self, session: DetectionSession | None = None, max_ticks: int | None = None) -> DetectionSession:
        raise NotImplementedError("Implement process method")
