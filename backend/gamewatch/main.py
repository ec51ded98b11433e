"""
FastAPI application for GameWatch
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from datetime import datetime, timezone

from gamewatch import __version__
from gamewatch.api.recommendations import router as recommendations_router
from gamewatch.core.config import settings
from gamewatch.services.sleeper_api_service import players_cache

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.APP_NAME,
    description="Which NFL games to watch for your Sleeper fantasy rosters",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_frontend_urls(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(recommendations_router, prefix="/api", tags=["recommendations"])


@app.get("/")
async def root():
    return {
        "message": f"{settings.APP_NAME} API",
        "version": __version__,
        "environment": settings.ENVIRONMENT,
    }


@app.get("/health")
async def health():
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "players_cache": players_cache.get_stats(),
    }


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    logger.info(f"Starting server on port {port} - {settings.ENVIRONMENT.upper()} mode")
    uvicorn.run(app, host="0.0.0.0", port=port)
