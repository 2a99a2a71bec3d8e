# Interfaces a treasure hunt session needs from its host
from typing import Any, Optional, Protocol

from treasure_hunt.game.placement import Pose
from treasure_hunt.models.enums import NotificationLevel, TrackingStatus
from treasure_hunt.schemas.catalog import TreasureResponse

# Opaque handle returned by the renderer
Handle = Any


class TrackingProvider(Protocol):
    """Pose tracking subsystem"""

    def current_pose(self) -> Optional[Pose]:
        ...

    def tracking_status(self) -> TrackingStatus:
        ...


class Renderer(Protocol):
    """Scene that shows the collectible and reports taps on it"""

    def instantiate(self, transform: Pose, model_ref: str) -> Handle:
        ...

    def destroy(self, handle: Handle) -> None:
        ...

    def set_interactive(self, handle: Handle, interactive: bool) -> None:
        ...


class Notifier(Protocol):
    """Short messages and the result dialog shown to the player"""

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO, duration: float = 2.0) -> None:
        ...

    def show_result(self, treasure: TreasureResponse) -> None:
        ...
