# treasure_hunt/config.py
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./treasure.db"

    # API configuration
    API_PREFIX: str = "/api/v1"

    # Local files
    SEED_DATA_PATH: Optional[str] = None  # None -> bundled treasure_data.json
    PREFERENCES_PATH: str = "~/.treasurehunt/preferences.json"

    # Spawn session timings (seconds)
    SPAWN_DELAY_SECONDS: float = 3.0
    TRACKING_POLL_INTERVAL_SECONDS: float = 1.0
    TRACKING_TIMEOUT_SECONDS: Optional[float] = None  # None waits forever
    REVEAL_DELAY_SECONDS: float = 1.0
    ABORT_MESSAGE_SECONDS: float = 2.0

    # Placement, in metres relative to the viewer
    MODEL_REF: str = "treasure_chest.glb"
    PLACEMENT_OFFSET_Y: float = -0.5
    PLACEMENT_OFFSET_Z: float = -0.8
    PLACEMENT_JITTER_X: float = 0.3

    # Collection persistence
    COLLECT_RETRY_ATTEMPTS: int = 3
    COLLECT_RETRY_DELAY_SECONDS: float = 0.5

    # Selection
    SCOPED_FALLBACK_TO_GLOBAL: bool = False

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


@lru_cache()
def get_settings():
    return Settings()
