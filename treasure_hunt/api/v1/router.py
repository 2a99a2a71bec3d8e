# treasure_hunt/api/v1/router.py
from fastapi import APIRouter
from treasure_hunt.api.v1 import catalog, progress

# Create the main router
api_router = APIRouter()

# Include all the sub-routers
api_router.include_router(catalog.router, tags=["catalog"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
