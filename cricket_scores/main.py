import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from cricket_scores.api.routes import router
from cricket_scores.core.config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Configure logging on startup, report shutdown.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Cricket Scores (data mode: %s)", settings.DATA_MODE)

    yield

    logger.info("Shutting down Cricket Scores")

app = FastAPI(
    title="Cricket Scores",
    description="Batting scores with per-country averages, from bundled data or a remote endpoint",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Cricket Scores",
        "version": "1.0.0",
        "endpoints": {
            "scores": "GET /scores?mode=test|server",
            "average": "GET /scores/average?country=India",
            "chart": "GET /scores/chart",
            "health": "GET /health"
        }
    }
