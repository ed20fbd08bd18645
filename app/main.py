import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import documents
from app.db import close_db, init_db

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info("Starting up the application...")
    await init_db()

    yield

    logger.info("Shutting down the application...")
    await close_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="DocVault",
        description="Document ingestion with content-addressed storage and background text extraction.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Include API routers
    app.include_router(documents.router, prefix="/api/v1", tags=["Documents"])

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Perform a health check."""
        return {"status": "ok"}

    return app


app = create_app()
