import time
from typing import Callable

from attrs import define, field, validators

from domain.model import ConsecutiveDetection, DetectionSettings, MatchResult

DETECTION_TIMEOUT_MS = 2000


def _now_ms() -> float:
    return time.monotonic() * 1000


@define
class UpdateConsecutiveDetections:
    """Confirms an identity only after sustained agreement across frames."""

    settings: DetectionSettings = field(
        validator=validators.instance_of(DetectionSettings)
    )
    timeout_ms: float = DETECTION_TIMEOUT_MS
    clock: Callable[[], float] = _now_ms

    def invoke(
        self,
        detections: dict[str, ConsecutiveDetection],
        employee_id: str,
        match: MatchResult,
    ) -> bool:
        now = self.clock()
        current = detections.get(employee_id)

        if current is None or now - current.last_detection > self.timeout_ms:
            detections[employee_id] = ConsecutiveDetection(
                count=1,
                last_detection=now,
                average_distance=match.distance,
            )
            return False

        current.count += 1
        current.last_detection = now
        current.average_distance = (
            current.average_distance * (current.count - 1) + match.distance
        ) / current.count

        return (
            current.count >= self.settings.required_consecutive_detections
            and current.average_distance <= self.settings.max_detection_distance
        )
