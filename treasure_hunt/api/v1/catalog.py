from typing import List
from fastapi import APIRouter, Depends, HTTPException, status, Path

from treasure_hunt.api.dependencies import get_service, get_preferences
from treasure_hunt.preferences import Preferences
from treasure_hunt.schemas import ZoneResponse, SubZoneProgress, TreasureListResponse
from treasure_hunt.services.catalog_service import CatalogService
from treasure_hunt.services.progress_service import ProgressService

router = APIRouter()


@router.get("/zones", response_model=List[ZoneResponse])
async def list_zones(
    catalog_service: CatalogService = Depends(get_service(CatalogService)),
):
    """List every zone (building) in the catalog."""
    return catalog_service.list_zones()


@router.get("/zones/{zone_id}/subzones", response_model=List[SubZoneProgress])
async def list_sub_zones(
    zone_id: int = Path(..., description="ID of the zone"),
    catalog_service: CatalogService = Depends(get_service(CatalogService)),
    progress_service: ProgressService = Depends(get_service(ProgressService)),
):
    """
    List the sub-zones of a zone with their collection progress.
    """
    zone = catalog_service.get_zone(zone_id)
    if not zone:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Zone not found"
        )

    return progress_service.get_zone_progress(zone).sub_zones


@router.get("/subzones/{sub_zone_id}/treasures", response_model=TreasureListResponse)
async def list_treasures(
    sub_zone_id: int = Path(..., description="ID of the sub-zone"),
    progress_service: ProgressService = Depends(get_service(ProgressService)),
    preferences: Preferences = Depends(get_preferences),
):
    """
    List the treasures of a sub-zone.

    Opening a sub-zone makes it the area scoped treasure hunts draw from.
    """
    listing = progress_service.get_treasure_list(sub_zone_id)
    if not listing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Sub-zone not found"
        )

    preferences.set_last_sub_zone(sub_zone_id)
    return listing
