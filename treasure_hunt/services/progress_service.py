# treasure_hunt/services/progress_service.py
from typing import List, Optional
from sqlalchemy.orm import Session

from treasure_hunt.models.zone import Zone
from treasure_hunt.models.sub_zone import SubZone
from treasure_hunt.schemas.catalog import SubZoneResponse, TreasureResponse
from treasure_hunt.schemas.progress import (
    Progress, SubZoneProgress, ZoneProgress, CatalogProgress, TreasureListResponse
)
from treasure_hunt.services.catalog_service import CatalogService


class ProgressService:
    """
    Read-side aggregation of collection progress.

    Nothing is cached: a collection in an earlier session has to show up
    the next time the collection book is opened.
    """

    def __init__(self, db: Session):
        self.db = db
        self.catalog = CatalogService(db)

    def get_sub_zone_progress(self, sub_zone_id: int) -> Progress:
        """Collected/total for one sub-zone"""
        return Progress(
            collected=self.catalog.count_collected(sub_zone_id),
            total=self.catalog.count_treasures(sub_zone_id),
        )

    def get_zone_progress(self, zone: Zone) -> ZoneProgress:
        """Zone header with per sub-zone progress and the zone sum"""
        sub_zones: List[SubZoneProgress] = []
        for sub_zone in self.catalog.list_sub_zones(zone.id):
            sub_zones.append(
                SubZoneProgress(
                    **SubZoneResponse.model_validate(sub_zone).model_dump(),
                    progress=self.get_sub_zone_progress(sub_zone.id),
                )
            )

        return ZoneProgress(
            id=zone.id,
            code=zone.code,
            name=zone.name,
            sub_zones=sub_zones,
            progress=Progress(
                collected=sum(s.progress.collected for s in sub_zones),
                total=sum(s.progress.total for s in sub_zones),
            ),
        )

    def get_catalog_progress(self) -> CatalogProgress:
        """Every zone plus the global collected/total"""
        zones = [self.get_zone_progress(zone) for zone in self.catalog.list_zones()]
        return CatalogProgress(
            zones=zones,
            progress=Progress(
                collected=self.catalog.count_total_collected(),
                total=self.catalog.count_total_treasures(),
            ),
        )

    def get_treasure_list(self, sub_zone_id: int) -> Optional[TreasureListResponse]:
        """
        Treasure grid for one sub-zone.

        Returns:
            None if the sub-zone does not exist
        """
        sub_zone: Optional[SubZone] = self.catalog.get_sub_zone(sub_zone_id)
        if not sub_zone:
            return None

        treasures = [TreasureResponse.model_validate(t) for t in self.catalog.list_treasures(sub_zone_id)]
        return TreasureListResponse(
            zone_code=sub_zone.zone.code,
            sub_zone=SubZoneResponse.model_validate(sub_zone),
            progress=Progress(
                collected=sum(1 for t in treasures if t.is_collected),
                total=len(treasures),
            ),
            items=treasures,
        )
