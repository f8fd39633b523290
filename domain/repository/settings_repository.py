from abc import ABC, abstractmethod

from ..model import DetectionSettings


class SettingsRepository(ABC):
    @abstractmethod
    def get_settings(self) -> DetectionSettings:
        raise NotImplementedError("Implement get_settings method")

    @abstractmethod
    def save_settings(self, settings: DetectionSettings) -> bool:
        raise NotImplementedError("Implement save_settings method")

    @abstractmethod
    def reset_settings(self) -> DetectionSettings:
        raise NotImplementedError("Implement reset_settings method")
