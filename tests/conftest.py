from typing import Dict, List, Optional, Tuple

import pytest

from treasure_hunt.database import create_db_engine, create_session_factory, init_db
from treasure_hunt.game.placement import Pose
from treasure_hunt.models.enums import NotificationLevel, TrackingStatus
from treasure_hunt.models.sub_zone import SubZone
from treasure_hunt.models.treasure import Treasure
from treasure_hunt.models.zone import Zone
from treasure_hunt.preferences import Preferences


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


def add_catalog(db, zones) -> None:
    """
    zones: [(zone_id, code, name, [(sub_zone_id, name, {treasure_id: is_collected})])]
    """
    for zone_id, code, name, sub_zones in zones:
        db.add(Zone(id=zone_id, code=code, name=name))
        for sub_zone_id, sub_name, treasures in sub_zones:
            db.add(SubZone(id=sub_zone_id, zone_id=zone_id, name=sub_name, image_ref=f"img_{sub_zone_id}"))
            for treasure_id, collected in treasures.items():
                db.add(Treasure(
                    id=treasure_id,
                    sub_zone_id=sub_zone_id,
                    name=f"Treasure {treasure_id}",
                    image_ref=f"treasure_{treasure_id}",
                    is_collected=collected,
                ))
        db.flush()
    db.commit()


@pytest.fixture
def catalog(db):
    """W15 > Lab (7) holds treasures 1 (uncollected) and 2 (collected); W15 > Hall (8) holds 3 and 4."""
    add_catalog(db, [
        (1, "W15", "Engineering Hall", [
            (7, "Lab", {1: False, 2: True}),
            (8, "Hall", {3: False, 4: False}),
        ]),
        (2, "W17", "Library", [
            (9, "Reading Room", {5: True}),
        ]),
    ])
    return db


@pytest.fixture
def all_collected(db):
    add_catalog(db, [
        (1, "W15", "Engineering Hall", [
            (7, "Lab", {1: True, 2: True}),
            (8, "Hall", {3: True}),
        ]),
    ])
    return db


@pytest.fixture
def preferences(tmp_path):
    return Preferences(str(tmp_path / "prefs" / "preferences.json"))


class FakeTracker:
    """ACQUIRING for `ready_after` polls, then TRACKING; None never becomes ready"""

    def __init__(self, ready_after: Optional[int] = 0, pose: Optional[Pose] = None):
        self.ready_after = ready_after
        self.pose = pose if pose is not None else Pose()
        self.polls = 0

    def tracking_status(self) -> TrackingStatus:
        self.polls += 1
        if self.ready_after is not None and self.polls > self.ready_after:
            return TrackingStatus.TRACKING
        return TrackingStatus.ACQUIRING

    def current_pose(self) -> Optional[Pose]:
        return self.pose


class FakeRenderer:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.instantiated: List[Tuple[Pose, str]] = []
        self.destroyed: List[str] = []
        self.interactive: Dict[str, bool] = {}
        self.on_instantiate = None

    def instantiate(self, transform: Pose, model_ref: str) -> str:
        if self.fail:
            raise RuntimeError("model failed to load")
        self.instantiated.append((transform, model_ref))
        handle = f"node-{len(self.instantiated)}"
        self.interactive[handle] = True
        if self.on_instantiate:
            self.on_instantiate(handle)
        return handle

    def destroy(self, handle: str) -> None:
        self.destroyed.append(handle)

    def set_interactive(self, handle: str, interactive: bool) -> None:
        self.interactive[handle] = interactive


class FakeNotifier:
    def __init__(self):
        self.messages: List[Tuple[str, NotificationLevel]] = []
        self.results = []

    def notify(self, message, level=NotificationLevel.INFO, duration=2.0):
        self.messages.append((message, level))

    def show_result(self, treasure):
        self.results.append(treasure)


@pytest.fixture
def tracker():
    return FakeTracker()


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def notifier():
    return FakeNotifier()
