"""
Placement of the collectible relative to the viewer.

Poses follow the usual AR convention: translation in metres, rotation as a
unit quaternion (x, y, z, w), -Z pointing forward from the camera and +Y up.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

from treasure_hunt.game.errors import PoseUnavailable

if TYPE_CHECKING:
    from treasure_hunt.game.collaborators import TrackingProvider

logger = logging.getLogger(__name__)

IDENTITY_ROTATION = (0.0, 0.0, 0.0, 1.0)


def quaternion_multiply(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """
    Hamilton product a * b of two (x, y, z, w) quaternions.

    Args:
        a: Left quaternion
        b: Right quaternion

    Returns:
        Product quaternion (x, y, z, w)
    """
    ax, ay, az, aw = a
    bx, by, bz, bw = b
    return np.array([
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
        aw * bw - ax * bx - ay * by - az * bz,
    ])


def quaternion_to_rotation_matrix(q: np.ndarray) -> np.ndarray:
    """
    Convert a unit (x, y, z, w) quaternion to a 3x3 rotation matrix.
    """
    x, y, z, w = q
    return np.array([
        [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
        [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
        [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
    ])


@dataclass(frozen=True)
class Pose:
    """Rigid transform: position plus orientation"""
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float, float] = IDENTITY_ROTATION

    def __post_init__(self):
        q = np.asarray(self.rotation, dtype=float)
        norm = np.linalg.norm(q)
        if q.shape != (4,) or not np.isfinite(norm) or norm == 0:
            raise ValueError(f"Invalid rotation quaternion: {self.rotation}")
        if len(self.translation) != 3:
            raise ValueError(f"Invalid translation: {self.translation}")
        object.__setattr__(self, "translation", tuple(float(v) for v in self.translation))
        object.__setattr__(self, "rotation", tuple(float(v) for v in q / norm))

    @classmethod
    def from_translation(cls, x: float, y: float, z: float) -> "Pose":
        return cls(translation=(x, y, z))

    def rotation_matrix(self) -> np.ndarray:
        return quaternion_to_rotation_matrix(np.asarray(self.rotation))

    def compose(self, other: "Pose") -> "Pose":
        """
        Return self * other: `other` expressed in this pose's frame.

        Composing the viewer pose with a local offset puts the result where
        the viewer was looking, not at a world-fixed offset.
        """
        t = np.asarray(self.translation) + self.rotation_matrix() @ np.asarray(other.translation)
        q = quaternion_multiply(np.asarray(self.rotation), np.asarray(other.rotation))
        return Pose(translation=tuple(t), rotation=tuple(q))


@dataclass
class PlacementEngine:
    """
    Computes where the collectible appears: below and in front of the
    viewer, with a small random sideways jitter.
    """
    offset_y: float = -0.5
    offset_z: float = -0.8
    jitter_x: float = 0.3
    rng: random.Random = field(default_factory=random.Random)

    def offset(self) -> Pose:
        """Draw the local offset for one placement"""
        dx = self.rng.uniform(-self.jitter_x, self.jitter_x)
        return Pose.from_translation(dx, self.offset_y, self.offset_z)

    def compute(self, viewpoint: Optional[Pose]) -> Pose:
        """
        Compose the viewpoint with a freshly drawn offset.

        Raises:
            PoseUnavailable: If there is no viewpoint
        """
        if viewpoint is None:
            raise PoseUnavailable("No viewer pose available for placement")
        placement = viewpoint.compose(self.offset())
        logger.debug(f"Placement computed at {placement.translation}")
        return placement

    def place(self, tracker: "TrackingProvider") -> Pose:
        """Read the current pose from the tracker and compute the placement"""
        return self.compute(tracker.current_pose())
