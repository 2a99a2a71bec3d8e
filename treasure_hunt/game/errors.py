# Exceptions raised inside a treasure hunt session
from typing import Optional


class TreasureHuntError(Exception):
    """Base class for session errors. None of them should reach the host process."""


class TreasureNotFound(TreasureHuntError):
    """Selection found nothing to offer (named lookup miss or nothing left uncollected)"""
    def __init__(self, mode):
        self.mode = mode
        super().__init__(f"No treasure to offer for {mode.value} selection")


class PoseUnavailable(TreasureHuntError):
    """The viewer pose could not be read at placement time"""


class TrackingTimeout(TreasureHuntError):
    """Tracking did not become ready before the configured deadline"""
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"Tracking not ready after {timeout:.1f}s")


class PersistenceError(TreasureHuntError):
    """Writing a collection to the catalog store failed"""
    def __init__(self, treasure_id: int, attempts: int, cause: Optional[BaseException] = None):
        self.treasure_id = treasure_id
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Could not mark treasure {treasure_id} collected after {attempts} attempt(s): {cause}")


class InvalidTransition(TreasureHuntError):
    """A state change that the session lifecycle does not allow"""
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from {current.value} to {target.value}")
