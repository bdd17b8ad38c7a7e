import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import matches
from app.services.game.manager import get_match_manager

logger = logging.getLogger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Laser Duel API")
    logger.debug("Debug mode: %s", settings.DEBUG)

    # Initialize the match registry and start its cleanup task
    match_manager = get_match_manager()
    await match_manager.start_cleanup_task()
    logger.info("Match manager initialized")

    yield

    logger.info("Shutting down Laser Duel API")
    await match_manager.stop_cleanup_task()
    logger.info("Match registry cleanup complete")


app = FastAPI(
    title="Laser Duel API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.debug("CORS configured with origins: %s", settings.CORS_ORIGINS)

app.include_router(matches.router, prefix="/api/v1")
logger.debug("Routers registered: /api/v1/matches")


@app.get("/")
def root():
    return {"message": "Laser Duel API"}


@app.get("/health")
def health():
    return {"status": "healthy"}
