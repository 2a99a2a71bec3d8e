import json

import pytest
from pydantic import ValidationError

from treasure_hunt.database_seeder import load_seed_document, seed_catalog, seed_database
from treasure_hunt.models.sub_zone import SubZone
from treasure_hunt.models.treasure import Treasure
from treasure_hunt.models.zone import Zone
from treasure_hunt.services.catalog_service import CatalogService


DOCUMENT = {
    "zones": [
        {
            "id": 1,
            "code": "W15",
            "name": "Engineering Hall",
            "subZones": [
                {
                    "id": 7,
                    "name": "Lab",
                    "imageUrl": "subzone_lab",
                    "treasures": [
                        {"id": 1, "name": "Golden Soldering Iron", "description": "Still warm.", "imageUrl": "iron"},
                        {"id": 2, "name": "Lost Notebook", "imageUrl": "notebook", "isCollected": True},
                    ],
                }
            ],
        }
    ]
}


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "treasure_data.json"
    path.write_text(json.dumps(DOCUMENT), encoding="utf-8")
    return str(path)


def test_seed_document_accepts_camel_case_keys(seed_file) -> None:
    document = load_seed_document(seed_file)

    sub_zone = document.zones[0].sub_zones[0]
    assert sub_zone.image_ref == "subzone_lab"
    assert [t.is_collected for t in sub_zone.treasures] == [False, True]


def test_seed_document_is_validated(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text(json.dumps({"zones": [{"id": 1, "name": "No code"}]}), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_seed_document(str(path))


def test_bundled_document_loads() -> None:
    document = load_seed_document()

    assert document.zones
    ids = [t.id for z in document.zones for s in z.sub_zones for t in s.treasures]
    assert len(ids) == len(set(ids))


def test_seed_catalog_keeps_ids(db, seed_file) -> None:
    counts = seed_catalog(db, load_seed_document(seed_file))

    assert counts == (1, 1, 2)
    assert db.query(Zone).one().code == "W15"
    assert db.query(SubZone).one().id == 7
    assert CatalogService(db).count_collected(7) == 1
    assert db.query(Treasure).filter(Treasure.id == 1).one().image_ref == "iron"


def test_seed_database_runs_once(session_factory, preferences, seed_file) -> None:
    assert seed_database(session_factory, preferences, seed_file) is True
    assert preferences.initialized is True

    db = session_factory()
    try:
        CatalogService(db).mark_collected(1)
    finally:
        db.close()

    assert seed_database(session_factory, preferences, seed_file) is False

    db = session_factory()
    try:
        assert CatalogService(db).count_collected(7) == 2
    finally:
        db.close()


def test_forced_reseed_replaces_rows(session_factory, preferences, seed_file) -> None:
    seed_database(session_factory, preferences, seed_file)

    assert seed_database(session_factory, preferences, seed_file, force=True) is True

    db = session_factory()
    try:
        assert db.query(Treasure).count() == 2
    finally:
        db.close()


def test_forced_reseed_keeps_collected_treasures(session_factory, preferences, seed_file) -> None:
    seed_database(session_factory, preferences, seed_file)
    db = session_factory()
    try:
        assert CatalogService(db).mark_collected(1) is True
    finally:
        db.close()

    assert seed_database(session_factory, preferences, seed_file, force=True) is True

    db = session_factory()
    try:
        catalog = CatalogService(db)
        assert catalog.get_treasure(1).is_collected is True
        assert catalog.get_treasure(2).is_collected is True
        assert catalog.count_total_collected() == 2
    finally:
        db.close()


def test_failed_seed_leaves_flag_unset(session_factory, preferences, tmp_path) -> None:
    missing = str(tmp_path / "missing.json")

    assert seed_database(session_factory, preferences, missing) is False
    assert preferences.initialized is False
