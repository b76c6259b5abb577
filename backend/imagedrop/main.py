"""Imagedrop Backend Application.

Imagedrop accepts authenticated image uploads, stores them under random
names, serves them back under /uploads and deletes them once they are older
than the retention window.

Modules:
    - files: upload, retrieval and retention of stored images
    - config: settings file + environment overrides
    - errors: exception hierarchy mapped to HTTP statuses
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from imagedrop.config import AppConfig, get_config
from imagedrop.errors import ImagedropError
from imagedrop.exception_handlers import (
    fallback_http_exception_handler,
    imagedrop_exception_handler,
)
from imagedrop.files.router import router as files_router
from imagedrop.files.service import FileStorageService

logger = logging.getLogger(__name__)


def configure_logging(level: str = "info") -> None:
    """Configure the root logger and quiet chatty third-party loggers."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    for _noisy in (
        "multipart",
        "python_multipart",
        "uvicorn.access",
    ):
        logging.getLogger(_noisy).setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    storage: FileStorageService = app.state.storage
    storage.ensure_upload_dir()
    logger.info(
        "Serving uploads from %s (retention=%ss)",
        storage.upload_dir,
        storage.settings.retention_seconds,
    )

    yield  # Application runs here

    # Shutdown
    await storage.sweeper.drain()
    logger.info("Application shutdown complete")


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application around an explicit config.

    Args:
        config: Settings to use. Loaded from file and environment if omitted.
    """
    config = config or get_config()

    app = FastAPI(
        title="Imagedrop API",
        description="Temporary image hosting with authenticated uploads",
        version="0.1.0",
        lifespan=lifespan,
        redirect_slashes=False,
    )
    app.state.config = config
    app.state.storage = FileStorageService(config.storage)

    app.add_exception_handler(ImagedropError, imagedrop_exception_handler)
    app.add_exception_handler(StarletteHTTPException, fallback_http_exception_handler)

    app.include_router(files_router)
    return app
