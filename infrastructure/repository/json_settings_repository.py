import json
from pathlib import Path

from pydantic import ValidationError

from domain.model import DetectionSettings
from domain.repository import SettingsRepository
from utils import get_logger

logger = get_logger(__name__)


class JsonSettingsRepository(SettingsRepository):
    """Saved overrides in a JSON file, merged over the default settings."""

    def __init__(self, path: str = "face_detection_settings.json"):
        self.path = Path(path)

    def get_settings(self) -> DetectionSettings:
        defaults = DetectionSettings()
        if not self.path.is_file():
            return defaults
        try:
            saved = json.loads(self.path.read_text(encoding="utf-8"))
            return defaults.merged(saved)
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"Error loading settings from {self.path}: {e}")
            return defaults

    def save_settings(self, settings: DetectionSettings) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(settings.to_json(), indent=2), encoding="utf-8")
            return True
        except OSError as e:
            logger.error(f"Error saving settings to {self.path}: {e}")
            return False

    def reset_settings(self) -> DetectionSettings:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Error removing settings file {self.path}: {e}")
        return DetectionSettings()
