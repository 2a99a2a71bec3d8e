import enum


class TrackingStatus(str, enum.Enum):
    ACQUIRING = "acquiring"
    TRACKING = "tracking"
    LOST = "lost"

class GateState(str, enum.Enum):
    WAITING = "waiting"
    READY = "ready"

class SelectionMode(str, enum.Enum):
    BY_NAME = "by_name"
    RANDOM = "random"
    SCOPED = "scoped"

class SessionState(str, enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    AWAITING_TRACKING = "awaiting_tracking"
    SPAWNED = "spawned"
    COLLECTING = "collecting"
    COLLECTED = "collected"
    DONE = "done"
    ABORTED = "aborted"

class AbortReason(str, enum.Enum):
    NOT_FOUND = "not_found"
    ALL_COLLECTED = "all_collected"
    SELECTION_FAILED = "selection_failed"
    POSE_UNAVAILABLE = "pose_unavailable"
    TRACKING_TIMEOUT = "tracking_timeout"
    TRACKING_FAILED = "tracking_failed"
    SPAWN_FAILED = "spawn_failed"
    PERSISTENCE_FAILED = "persistence_failed"
    CANCELLED = "cancelled"

class NotificationLevel(str, enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
