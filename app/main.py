"""CaseTrack — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.infrastructure.api.dependencies import get_team_service
from app.infrastructure.api.routes_health import router as health_router
from app.infrastructure.api.routes_team import router as team_router
from app.infrastructure.api.routes_versions import router as versions_router
from app.tools.seed_roster import seed_roster

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: seed the team roster when ROSTER_CSV_PATH is configured."""
    if settings.roster_csv_path:
        roster = Path(settings.roster_csv_path)
        if roster.is_file():
            loaded = seed_roster(get_team_service(), roster)
            logger.info("Roster seeded with %d members", loaded)
        else:
            logger.warning("Roster file not found on startup: %s", roster)
    yield
    logger.info("Shutting down; in-memory case state is discarded")


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="CaseTrack — Case Versioning & Team Assignment",
        description="Append-only case history with rollback, and rule-based case routing",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router, prefix="/api")
    app.include_router(versions_router, prefix="/api")
    app.include_router(team_router, prefix="/api")

    return app


app = create_app()
