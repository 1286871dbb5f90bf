"""
Web server for the presentation order API.

Provides the FastAPI application and a uvicorn entry point.
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from ..infra.logging import configure_logging, get_logger
from ..infra.settings import settings
from .api.orders import router as orders_router

logger = get_logger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers mounted."""
    app = FastAPI(title="Presentation Order API", version="0.1.0")
    app.include_router(orders_router)

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


def main() -> None:
    configure_logging()
    logger.info("api_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(create_app(), host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
