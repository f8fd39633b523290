class SessionInitializationError(RuntimeError):
    """A check-in session could not be started."""


class ModelLoadError(SessionInitializationError):
    pass


class CameraAccessError(SessionInitializationError):
    pass


class AttendanceStoreError(RuntimeError):
    """The attendance store could not be queried or written."""
