# treasure_hunt/main.py
from typing import Optional
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse
import logging

from treasure_hunt.api.v1.router import api_router
from treasure_hunt.config import Settings, get_settings
from treasure_hunt.database import create_db_engine, create_session_factory, init_db
from treasure_hunt.database_seeder import seed_database
from treasure_hunt.preferences import Preferences

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    session_factory=None,
    preferences: Optional[Preferences] = None,
) -> FastAPI:
    """
    Build the collection book API.

    Without an explicit session factory the app creates its own engine from
    DATABASE_URL, creates the tables and runs the first-run seed import.
    """
    settings = settings or get_settings()
    preferences = preferences or Preferences(settings.PREFERENCES_PATH)

    if session_factory is None:
        engine = create_db_engine(settings.DATABASE_URL)
        init_db(engine)
        session_factory = create_session_factory(engine)
        seed_database(session_factory, preferences, settings.SEED_DATA_PATH)

    app = FastAPI(
        title="Treasure Hunt API",
        description="Collection book for the treasure hunt game: zones, areas, treasures and progress",
        version="0.1.0"
    )
    app.state.session_factory = session_factory
    app.state.preferences = preferences

    # Include API routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/")
    async def root():
        """Health check and welcome message"""
        return {
            "message": "Welcome to the Treasure Hunt API",
            "status": "online",
            "version": "0.1.0"
        }

    # Error handler for global exceptions
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global exception: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if not isinstance(exc, HTTPException) else exc.detail
            },
        )

    return app


if __name__ == "__main__":
    import uvicorn

    # Setup logging
    logging.basicConfig(
        level=get_settings().LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    uvicorn.run("treasure_hunt.main:create_app", factory=True, host="0.0.0.0", port=8000, reload=True)
