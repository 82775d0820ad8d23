"""
FitCoach Web API - FastAPI application.

Mounts the onboarding router under /api.
"""

import logging

from fastapi import FastAPI

from fitcoach import __version__
from fitcoach.logging_setup import configure_logging
from onboarding.api import router as onboarding_router

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    configure_logging()

    app = FastAPI(title="FitCoach", version=__version__)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    app.include_router(onboarding_router, prefix="/api")

    logger.info("FitCoach web app ready")
    return app


app = create_app()
