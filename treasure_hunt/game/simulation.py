# Console stand-ins for the tracking and rendering collaborators
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Optional

from treasure_hunt.game.placement import Pose
from treasure_hunt.models.enums import NotificationLevel, TrackingStatus
from treasure_hunt.schemas.catalog import TreasureResponse
from treasure_hunt.ui.console import (
    console, show_error, show_info, show_success, show_warning, show_treasure_result
)

logger = logging.getLogger(__name__)


class SimulatedTracker:
    """
    Tracker that reports ACQUIRING for a number of polls, then TRACKING.

    The viewer stands at eye height looking along -Z, turned by `yaw_degrees`
    around the vertical axis.
    """

    def __init__(self, polls_until_tracking: int = 2, eye_height: float = 1.6,
                 yaw_degrees: float = 0.0, lose_pose: bool = False):
        self.polls_until_tracking = polls_until_tracking
        self.eye_height = eye_height
        self.yaw_degrees = yaw_degrees
        self.lose_pose = lose_pose
        self.polls = 0

    @classmethod
    def random(cls, rng: Optional[random.Random] = None) -> "SimulatedTracker":
        rng = rng or random.Random()
        return cls(polls_until_tracking=rng.randint(0, 3), yaw_degrees=rng.uniform(-180.0, 180.0))

    def tracking_status(self) -> TrackingStatus:
        self.polls += 1
        if self.polls > self.polls_until_tracking:
            return TrackingStatus.TRACKING
        return TrackingStatus.ACQUIRING

    def current_pose(self) -> Optional[Pose]:
        if self.lose_pose:
            return None
        half = math.radians(self.yaw_degrees) / 2
        return Pose(
            translation=(0.0, self.eye_height, 0.0),
            rotation=(0.0, math.sin(half), 0.0, math.cos(half)),
        )


@dataclass
class SceneNode:
    model_ref: str
    transform: Pose
    interactive: bool = True


@dataclass
class ConsoleRenderer:
    """Keeps spawned nodes in a dict and prints what happens to them"""
    nodes: Dict[int, SceneNode] = field(default_factory=dict)
    _next_handle: int = 1

    def instantiate(self, transform: Pose, model_ref: str) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.nodes[handle] = SceneNode(model_ref=model_ref, transform=transform)
        x, y, z = transform.translation
        console.print(f"[dim]Placed {model_ref} at ({x:.2f}, {y:.2f}, {z:.2f})[/dim]")
        return handle

    def destroy(self, handle: int) -> None:
        if self.nodes.pop(handle, None) is not None:
            console.print("[dim]The treasure chest fades away.[/dim]")

    def set_interactive(self, handle: int, interactive: bool) -> None:
        node = self.nodes.get(handle)
        if node is not None:
            node.interactive = interactive


class ConsoleNotifier:
    """Prints toasts and the result dialog with rich"""

    def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO, duration: float = 2.0) -> None:
        if level == NotificationLevel.ERROR:
            show_error(message)
        elif level == NotificationLevel.WARNING:
            show_warning(message)
        elif level == NotificationLevel.SUCCESS:
            show_success(message)
        else:
            show_info(message)

    def show_result(self, treasure: TreasureResponse) -> None:
        show_treasure_result(treasure)
