from enum import Enum

class SessionStatus(str, Enum):
    LOADING = 'Loading'
    RUNNING = 'Running'
    STOPPED = 'Stopped'
    FAILED = 'Failed'
