import threading

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .consecutive_detection import ConsecutiveDetection
from .gallery_entry import GalleryEntry
from .recognition_event import RecognitionEvent
from .session_status import SessionStatus


class DetectionSession(BaseModel):
    """State owned by one running check-in session.

    Destroyed with the session; nothing here is persisted.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    status: SessionStatus = SessionStatus.LOADING
    gallery: dict[str, GalleryEntry] = Field(default_factory=dict)
    consecutive_detections: dict[str, ConsecutiveDetection] = Field(default_factory=dict)
    recognized: list[RecognitionEvent] = Field(default_factory=list)
    store_available: bool = True
    last_rejection: str | None = None
    frame_count: int = 0
    dropped_ticks: int = 0
    overlay: np.ndarray | None = None
    errors: list[str] = Field(default_factory=list)

    _processing: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    @property
    def is_processing(self) -> bool:
        return self._processing.locked()

    def try_begin_processing(self) -> bool:
        return self._processing.acquire(blocking=False)

    def end_processing(self) -> None:
        if self._processing.locked():
            self._processing.release()

    @property
    def verified_employee_ids(self) -> set[str]:
        return {event.employee_id for event in self.recognized}

    @property
    def total_detections(self) -> int:
        return len(self.recognized)
