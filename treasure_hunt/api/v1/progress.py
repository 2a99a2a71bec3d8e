from fastapi import APIRouter, Depends

from treasure_hunt.api.dependencies import get_service, get_preferences
from treasure_hunt.preferences import Preferences
from treasure_hunt.schemas import CatalogProgress
from treasure_hunt.services.progress_service import ProgressService

router = APIRouter()


@router.get("/", response_model=CatalogProgress)
async def get_progress(
    progress_service: ProgressService = Depends(get_service(ProgressService)),
):
    """Collection progress for every zone and sub-zone, recomputed on each call."""
    return progress_service.get_catalog_progress()


@router.get("/scope")
async def get_scope(preferences: Preferences = Depends(get_preferences)):
    """The sub-zone scoped treasure hunts currently draw from."""
    return {"last_sub_zone_id": preferences.last_sub_zone_id}
