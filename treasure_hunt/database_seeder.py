# treasure_hunt/database_seeder.py
import os
import json
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from treasure_hunt.config import get_settings
from treasure_hunt.database import SessionFactory
from treasure_hunt.models.zone import Zone
from treasure_hunt.models.sub_zone import SubZone
from treasure_hunt.models.treasure import Treasure
from treasure_hunt.preferences import Preferences
from treasure_hunt.schemas.seed import SeedDocument

logger = logging.getLogger(__name__)

BUNDLED_SEED_PATH = os.path.join(os.path.dirname(__file__), "data", "treasure_data.json")


def load_seed_document(path: Optional[str] = None) -> SeedDocument:
    """
    Read and validate a seed document.

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If the document does not match the schema
    """
    path = path or BUNDLED_SEED_PATH
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return SeedDocument.model_validate(data)


def seed_catalog(db: Session, document: SeedDocument) -> Tuple[int, int, int]:
    """
    Import zones, sub-zones and treasures verbatim, keeping their ids.

    Rows that already exist are replaced by the document's version, except
    that a treasure already collected stays collected.

    Returns:
        (zones, sub_zones, treasures) imported
    """
    zone_count = sub_zone_count = treasure_count = 0
    collected_ids = {
        treasure_id for (treasure_id,) in db.query(Treasure.id).filter(Treasure.is_collected.is_(True))
    }

    for zone in document.zones:
        db.merge(Zone(id=zone.id, code=zone.code, name=zone.name))
        zone_count += 1

        for sub in zone.sub_zones:
            db.merge(SubZone(id=sub.id, zone_id=zone.id, name=sub.name, image_ref=sub.image_ref))
            sub_zone_count += 1

            for treasure in sub.treasures:
                db.merge(
                    Treasure(
                        id=treasure.id,
                        sub_zone_id=sub.id,
                        name=treasure.name,
                        image_ref=treasure.image_ref,
                        is_collected=treasure.is_collected or treasure.id in collected_ids,
                    )
                )
                treasure_count += 1

        # Parents must exist before their children are flushed
        db.flush()

    db.commit()
    logger.info(f"Imported {zone_count} zones, {sub_zone_count} sub-zones and {treasure_count} treasures")
    return zone_count, sub_zone_count, treasure_count


def seed_database(
    session_factory: SessionFactory,
    preferences: Preferences,
    path: Optional[str] = None,
    force: bool = False,
) -> bool:
    """
    Import the bundled catalog on first run.

    The preferences flag is only set once the import has committed, so a
    failed import is retried on the next start.

    Returns:
        True if the catalog was imported by this call
    """
    if preferences.initialized and not force:
        logger.info("Catalog already initialized, skipping seed import")
        return False

    path = path or get_settings().SEED_DATA_PATH
    logger.info("Starting catalog seeding...")
    db = session_factory()
    try:
        document = load_seed_document(path)
        seed_catalog(db, document)
        preferences.mark_initialized()
        logger.info("Catalog seeding completed successfully")
        return True
    except Exception as e:
        logger.error(f"Error seeding catalog: {str(e)}")
        db.rollback()
        return False
    finally:
        db.close()
