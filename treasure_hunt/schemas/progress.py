from typing import List
from pydantic import BaseModel, computed_field

from treasure_hunt.schemas.catalog import ZoneResponse, SubZoneResponse, TreasureResponse


class Progress(BaseModel):
    """Collected/total counter"""
    collected: int = 0
    total: int = 0

    @computed_field
    @property
    def ratio(self) -> float:
        return self.collected / self.total if self.total else 0.0

    def __str__(self):
        return f"{self.collected} / {self.total}"

class SubZoneProgress(SubZoneResponse):
    """Sub-zone with its own collection progress"""
    progress: Progress

class ZoneProgress(ZoneResponse):
    """Zone header followed by its sub-zones"""
    sub_zones: List[SubZoneProgress] = []
    progress: Progress

class CatalogProgress(BaseModel):
    """Whole collection book"""
    zones: List[ZoneProgress] = []
    progress: Progress

class TreasureListResponse(BaseModel):
    """Treasures of one sub-zone with a collected/total header"""
    zone_code: str
    sub_zone: SubZoneResponse
    progress: Progress
    items: List[TreasureResponse]
