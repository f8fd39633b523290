from abc import ABC, abstractmethod

import numpy as np


class VideoSource(ABC):
    @abstractmethod
    def list_devices(self) -> list[int]:
        raise NotImplementedError("Implement list_devices method")

    @abstractmethod
    def open(self, device: int | str | None = None) -> None:
        raise NotImplementedError("Implement open method")

    @abstractmethod
    def read(self) -> np.ndarray | None:
        raise NotImplementedError("Implement read method")

    @abstractmethod
    def is_opened(self) -> bool:
        raise NotImplementedError("Implement is_opened method")

    @abstractmethod
    def release(self) -> None:
        raise NotImplementedError("Implement release method")
