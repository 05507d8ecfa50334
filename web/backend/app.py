#!/usr/bin/env python3
"""
Kudos Notifications - FastAPI Application

HTTP triggers for the notification dispatcher, meant to be called by a
scheduler or a database webhook.

Usage:
    python -m web.backend.app

Then:
    - POST http://localhost:8080/process-notifications - deliver one batch
    - POST http://localhost:8080/schedule-reminders - enqueue weekly reminders
    - http://localhost:8080/docs - API Documentation (Swagger UI)
"""

import logging

from fastapi import FastAPI, HTTPException

from database.database import init_engine

from .config import get_config
from .exceptions import (
    ServiceException,
    service_exception_handler,
    http_exception_handler,
    general_exception_handler
)
from .models.responses import HealthResponse
from .routers import (
    notifications_router,
    reminders_router
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Kudos Notifications API",
        description="Delivers queued kudos notifications over chat and email",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    # Register exception handlers
    app.add_exception_handler(ServiceException, service_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(notifications_router)
    app.include_router(reminders_router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        """Health check endpoint."""
        return HealthResponse(status="healthy", service="kudos-notifications")

    return app


app = create_app()


def main():
    """Run the web server."""
    import uvicorn

    config = get_config()
    init_engine(config.database.url)

    logger.info(f"Starting Kudos Notifications server on {config.web.host}:{config.web.port}")
    logger.info(f"API Docs: http://{config.web.host}:{config.web.port}/docs")

    uvicorn.run(
        app,
        host=config.web.host,
        port=config.web.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
