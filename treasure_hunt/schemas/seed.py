from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices


class TreasureSeed(BaseModel):
    """Treasure entry in the seed document"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    image_ref: Optional[str] = Field(None, validation_alias=AliasChoices("image_ref", "imageRef", "imageUrl"))
    is_collected: bool = Field(False, validation_alias=AliasChoices("is_collected", "isCollected"))

class SubZoneSeed(BaseModel):
    """Sub-zone entry in the seed document"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(..., min_length=1)
    image_ref: Optional[str] = Field(None, validation_alias=AliasChoices("image_ref", "imageRef", "imageUrl"))
    treasures: List[TreasureSeed] = []

class ZoneSeed(BaseModel):
    """Zone entry in the seed document"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    code: str = Field(..., min_length=1)
    name: str
    sub_zones: List[SubZoneSeed] = Field(default_factory=list, validation_alias=AliasChoices("sub_zones", "subZones"))

class SeedDocument(BaseModel):
    """Bundled catalog document imported on first run"""
    zones: List[ZoneSeed]
