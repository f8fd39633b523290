from attrs import define, field, validators
from pydantic import ValidationError

from domain.model import DetectionSettings
from domain.repository import SettingsRepository
from utils import get_logger

logger = get_logger(__name__)


@define
class UpdateDetectionSettings:
    settings_repository: SettingsRepository = field(
        validator=validators.instance_of(SettingsRepository)
    )

    def invoke(self, changes: dict) -> dict:
        unknown = DetectionSettings.unknown_keys(changes)
        if unknown:
            return {"success": False, "message": f"Unknown settings: {', '.join(unknown)}"}

        current = self.settings_repository.get_settings()
        try:
            updated = current.merged(changes)
        except ValidationError as e:
            logger.error(f"Invalid detection settings {changes}: {e}")
            return {"success": False, "message": str(e)}

        if not self.settings_repository.save_settings(updated):
            return {"success": False, "message": "Settings could not be saved"}

        logger.info(f"Detection settings updated: {changes}")
        return {"success": True, "settings": updated.to_json()}

    def reset(self) -> DetectionSettings:
        settings = self.settings_repository.reset_settings()
        logger.info("Detection settings reset to defaults")
        return settings
