from attrs import define, field, validators
from domain.model import DetectionSettings
from domain.repository import SettingsRepository

from utils import get_logger

logger = get_logger(__name__)


@define
class GetDetectionSettings:
    settings_repository: SettingsRepository = field(
        validator=validators.instance_of(SettingsRepository)
    )

    def invoke(self, overrides: dict | None = None) -> DetectionSettings:
        """Saved settings, with ``overrides`` applied for this run only.

        Raises ValueError for an unknown key and pydantic's ValidationError
        (also a ValueError) for an out-of-range value.
        """
        try:
            settings = self.settings_repository.get_settings()
        except Exception as e:
            logger.error(f"Error loading detection settings: {e}")
            settings = DetectionSettings()
        if overrides:
            unknown = DetectionSettings.unknown_keys(overrides)
            if unknown:
                raise ValueError(f"Unknown settings: {', '.join(unknown)}")
            settings = settings.merged(overrides)
        return settings
