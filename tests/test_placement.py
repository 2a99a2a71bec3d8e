import math
import random

import numpy as np
import pytest

from treasure_hunt.game.errors import PoseUnavailable
from treasure_hunt.game.placement import PlacementEngine, Pose, quaternion_multiply


def _yaw(degrees: float) -> tuple:
    half = math.radians(degrees) / 2
    return (0.0, math.sin(half), 0.0, math.cos(half))


def test_identity_viewpoint_places_below_and_in_front() -> None:
    engine = PlacementEngine(rng=random.Random(7))
    expected_dx = random.Random(7).uniform(-0.3, 0.3)

    placement = engine.compute(Pose())

    assert placement.translation == pytest.approx((expected_dx, -0.5, -0.8))
    assert placement.rotation == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_offset_is_relative_to_where_the_viewer_looks() -> None:
    # Turned 90 degrees left: the viewer's forward (-Z) is world -X
    viewpoint = Pose(translation=(1.0, 1.6, 2.0), rotation=_yaw(90))
    engine = PlacementEngine(jitter_x=0.0)

    placement = engine.compute(viewpoint)

    assert placement.translation == pytest.approx((1.0 - 0.8, 1.1, 2.0), abs=1e-9)
    assert placement.rotation == pytest.approx(viewpoint.rotation)


def test_same_seed_same_placement() -> None:
    viewpoint = Pose(translation=(0.3, 1.5, -1.0), rotation=_yaw(30))

    first = PlacementEngine(rng=random.Random(123)).compute(viewpoint)
    second = PlacementEngine(rng=random.Random(123)).compute(viewpoint)

    assert first == second


def test_jitter_stays_within_bounds() -> None:
    engine = PlacementEngine(rng=random.Random(0))

    for _ in range(200):
        x, y, z = engine.compute(Pose()).translation
        assert -0.3 <= x <= 0.3
        assert (y, z) == pytest.approx((-0.5, -0.8))


def test_missing_pose_raises_pose_unavailable() -> None:
    engine = PlacementEngine()

    with pytest.raises(PoseUnavailable):
        engine.compute(None)


def test_place_reads_the_tracker(tracker) -> None:
    tracker.pose = Pose(translation=(0.0, 2.0, 0.0))
    placement = PlacementEngine(jitter_x=0.0).place(tracker)

    assert placement.translation == pytest.approx((0.0, 1.5, -0.8))


def test_compose_rotations_follow_quaternion_product() -> None:
    a = Pose(rotation=_yaw(30))
    b = Pose(rotation=_yaw(60))

    composed = a.compose(b)

    assert composed.rotation == pytest.approx(_yaw(90))
    assert tuple(quaternion_multiply(np.array(_yaw(90)), np.array((0.0, 0.0, 0.0, 1.0)))) == pytest.approx(_yaw(90))


def test_rotation_is_normalized_and_validated() -> None:
    pose = Pose(rotation=(0.0, 0.0, 0.0, 2.0))

    assert pose.rotation == (0.0, 0.0, 0.0, 1.0)
    with pytest.raises(ValueError):
        Pose(rotation=(0.0, 0.0, 0.0, 0.0))
