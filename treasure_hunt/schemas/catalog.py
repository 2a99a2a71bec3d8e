from typing import Optional
from pydantic import BaseModel, ConfigDict


class ZoneResponse(BaseModel):
    """Zone as shown in the collection book"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    code: str
    name: str

class SubZoneResponse(BaseModel):
    """Sub-zone (room or area) inside a zone"""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    zone_id: int
    name: str
    image_ref: Optional[str] = None

class TreasureResponse(BaseModel):
    """
    Snapshot of a treasure row.

    Frozen so a session can hold on to the selected treasure while the
    store changes underneath it.
    """
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    sub_zone_id: int
    name: str
    image_ref: Optional[str] = None
    is_collected: bool
