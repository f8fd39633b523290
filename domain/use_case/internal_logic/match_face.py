import numpy as np
from attrs import define, field, validators

from domain.model import DetectionSettings, GalleryEntry, MatchResult, UNKNOWN_LABEL
from utils import get_logger
from utils.helpers import euclidean_distance

logger = get_logger(__name__)


@define
class MatchFace:
    settings: DetectionSettings = field(
        validator=validators.instance_of(DetectionSettings)
    )

    def invoke(self, descriptor, gallery: dict[str, GalleryEntry]) -> MatchResult:
        if not gallery:
            return MatchResult()

        descriptor = np.asarray(descriptor, dtype=np.float32)
        best_label = UNKNOWN_LABEL
        best_name = None
        best_distance = 1.0
        match_count = 0
        total_distance = 0.0

        # Ascending ids plus a strict comparison: the lowest id wins a tie.
        for employee_id in sorted(gallery):
            entry = gallery[employee_id]
            employee_best = float("inf")
            for reference in entry.descriptors:
                distance = euclidean_distance(descriptor, reference)
                if distance < self.settings.max_detection_distance:
                    match_count += 1
                    total_distance += distance
                employee_best = min(employee_best, distance)

            logger.debug("Distance to %s (%s): %.3f", entry.name, employee_id, employee_best)
            if employee_best < best_distance:
                best_label = employee_id
                best_name = entry.name
                best_distance = employee_best

        average_distance = total_distance / match_count if match_count else 1.0
        result = MatchResult(
            label=best_label,
            name=best_name,
            distance=best_distance,
            confidence=1.0 - best_distance,
            average_distance=average_distance,
            average_confidence=1.0 - average_distance,
        )
        logger.debug(
            "Best match %s confidence %.1f%% (average %.1f%%)",
            result.label,
            result.confidence * 100,
            result.average_confidence * 100,
        )
        return result
