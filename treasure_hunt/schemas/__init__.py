"""
Schema definitions for the application.
This module exports all schemas for easy importing throughout the package.
"""

# Import from catalog
from treasure_hunt.schemas.catalog import (
    ZoneResponse, SubZoneResponse, TreasureResponse
)

# Import from progress
from treasure_hunt.schemas.progress import (
    Progress, SubZoneProgress, ZoneProgress, CatalogProgress, TreasureListResponse
)

# Import from seed
from treasure_hunt.schemas.seed import (
    TreasureSeed, SubZoneSeed, ZoneSeed, SeedDocument
)
