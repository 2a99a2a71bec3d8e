# treasure_hunt/services/catalog_service.py
import logging
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from treasure_hunt.models.zone import Zone
from treasure_hunt.models.sub_zone import SubZone
from treasure_hunt.models.treasure import Treasure

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for the zone -> sub-zone -> treasure catalog.

    Every method is read-only except mark_collected. Lookups for unknown
    ids return empty lists, zero counts or None rather than raising.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Zone ---

    def list_zones(self) -> List[Zone]:
        """Get all zones"""
        return self.db.query(Zone).order_by(Zone.id).all()

    def get_zone(self, zone_id: int) -> Optional[Zone]:
        """Get a zone by ID"""
        return self.db.query(Zone).filter(Zone.id == zone_id).first()

    # --- SubZone ---

    def list_sub_zones(self, zone_id: int) -> List[SubZone]:
        """Get the sub-zones of a zone"""
        return (
            self.db.query(SubZone)
            .filter(SubZone.zone_id == zone_id)
            .order_by(SubZone.id)
            .all()
        )

    def get_sub_zone(self, sub_zone_id: int) -> Optional[SubZone]:
        """Get a sub-zone by ID"""
        return self.db.query(SubZone).filter(SubZone.id == sub_zone_id).first()

    # --- Treasure ---

    def list_treasures(self, sub_zone_id: int) -> List[Treasure]:
        """Get the treasures of a sub-zone"""
        return (
            self.db.query(Treasure)
            .filter(Treasure.sub_zone_id == sub_zone_id)
            .order_by(Treasure.id)
            .all()
        )

    def get_treasure(self, treasure_id: int) -> Optional[Treasure]:
        """Get a treasure by ID"""
        return self.db.query(Treasure).filter(Treasure.id == treasure_id).first()

    def get_treasure_by_name(self, name: str) -> Optional[Treasure]:
        """Get a treasure by its exact name"""
        return (
            self.db.query(Treasure)
            .filter(Treasure.name == name)
            .order_by(Treasure.id)
            .first()
        )

    def get_random_uncollected(self, sub_zone_id: Optional[int] = None) -> Optional[Treasure]:
        """
        Pick one uncollected treasure uniformly at random.

        Args:
            sub_zone_id: Restrict the draw to this sub-zone; None draws from
                the whole catalog

        Returns:
            A treasure, or None when nothing is left to find
        """
        query = self.db.query(Treasure).filter(Treasure.is_collected.is_(False))
        if sub_zone_id is not None:
            query = query.filter(Treasure.sub_zone_id == sub_zone_id)
        return query.order_by(func.random()).limit(1).first()

    # --- Counts ---

    def count_treasures(self, sub_zone_id: int) -> int:
        """Count the treasures of a sub-zone"""
        return (
            self.db.query(func.count(Treasure.id))
            .filter(Treasure.sub_zone_id == sub_zone_id)
            .scalar()
        ) or 0

    def count_collected(self, sub_zone_id: int) -> int:
        """Count the collected treasures of a sub-zone"""
        return (
            self.db.query(func.count(Treasure.id))
            .filter(Treasure.sub_zone_id == sub_zone_id, Treasure.is_collected.is_(True))
            .scalar()
        ) or 0

    def count_total_treasures(self) -> int:
        """Count every treasure in the catalog"""
        return self.db.query(func.count(Treasure.id)).scalar() or 0

    def count_total_collected(self) -> int:
        """Count every collected treasure in the catalog"""
        return (
            self.db.query(func.count(Treasure.id))
            .filter(Treasure.is_collected.is_(True))
            .scalar()
        ) or 0

    # --- Mutation ---

    def mark_collected(self, treasure_id: int) -> bool:
        """
        Mark a treasure as collected.

        The update is unconditional, so applying it to an already collected
        treasure leaves the row unchanged. There is no way back to
        uncollected.

        Returns:
            True if a treasure with that ID exists
        """
        matched = (
            self.db.query(Treasure)
            .filter(Treasure.id == treasure_id)
            .update({Treasure.is_collected: True}, synchronize_session=False)
        )
        self.db.commit()

        if not matched:
            logger.warning(f"mark_collected: treasure {treasure_id} does not exist")
        return bool(matched)
