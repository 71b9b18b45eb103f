"""Image Host Application.

This is the main entry point for the image host service: a small
self-hosted server that streams images from one directory and lets the
holder of a shared password upload and delete them through a gallery page.

Modules:
    - storage: path sanitizing, MIME lookup, ImageStore, file streaming
    - auth: shared-password AuthGate and the login endpoint
    - gallery: HTML views plus upload/delete endpoints
"""
import argparse
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from imagehost.auth.router import router as auth_router
from imagehost.auth.service import AuthGate
from imagehost.config import AppConfig, load_config
from imagehost.gallery.router import router as gallery_router
from imagehost.storage.router import router as storage_router
from imagehost.storage.service import ImageStore

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Multipart parser debug output is per-chunk noise
for _noisy in (
    "multipart",
    "python_multipart",
):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "info") -> None:
    """Install the root handler and apply the configured level."""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    configured_level = getattr(logging, level.upper(), None)
    if isinstance(configured_level, int):
        logging.getLogger().setLevel(configured_level)
    else:
        logger.warning("Unknown log level %r, keeping INFO", level)


async def _server_error(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return PlainTextResponse("Server Error", status_code=500)


def create_app(config: AppConfig) -> FastAPI:
    """Build the application around one immutable configuration.

    Args:
        config: Loaded settings; shared read-only by every component.

    Returns:
        FastAPI app with the store and auth gate on ``app.state``.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager for startup/shutdown events."""
        if config.uses_default_password:
            logger.warning(
                "Using the default password; set IMAGE_HOST_PASSWORD before "
                "exposing this server"
            )
        logger.info(
            f"Image host running at http://{config.server.host}:{config.server.port} "
            f"(serving {config.image_root})"
        )
        yield
        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Image Host",
        description="Self-hosted image host with a password-protected gallery",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.store = ImageStore(config.image_root, config.storage.max_upload_bytes)
    app.state.auth_gate = AuthGate(config.auth.password, config.auth.cookie_max_age)

    app.add_exception_handler(Exception, _server_error)

    app.include_router(auth_router)
    app.include_router(gallery_router)
    # Catch-all file route goes last
    app.include_router(storage_router)

    return app


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, load configuration and serve with uvicorn."""
    parser = argparse.ArgumentParser(prog="imagehost", description="Run the image host.")
    parser.add_argument("--settings", help="Path to imagehost.settings.yaml")
    args = parser.parse_args(argv)

    configure_logging()
    config = load_config(settings_path=Path(args.settings) if args.settings else None)
    configure_logging(config.logging.level)
    app = create_app(config)
    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=config.logging.level,
        # Routers already log uploads, deletes and failures
        access_log=False,
    )
