"""FastAPI application factory and global exception handling."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request
from starlette.responses import JSONResponse

from profile_directory import __version__ as app_version
from profile_directory.api.dependencies import DirectoryServices
from profile_directory.api.routes import router
from profile_directory.config import Settings, get_settings
from profile_directory.directory.images import ImageStore
from profile_directory.directory.loader import seed_store
from profile_directory.directory.storage import StorageBackend, create_storage
from profile_directory.directory.store import ProfileStore
from profile_directory.errors import (
    DirectoryError,
    GeocodingError,
    ImageNotFoundError,
    ProfileNotFoundError,
    StorageWriteError,
)
from profile_directory.geo.geocoder import Geocoder, NominatimGeocoder

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    ProfileNotFoundError: 404,
    ImageNotFoundError: 404,
    GeocodingError: 502,
    StorageWriteError: 503,
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_services(
    settings: Settings,
    storage: Optional[StorageBackend] = None,
    geocoder: Optional[Geocoder] = None,
) -> DirectoryServices:
    store = ProfileStore(storage or create_storage(settings), slot=settings.storage_slot)
    if settings.seed_file:
        seed_store(store, settings.seed_file)
    return DirectoryServices(
        settings=settings,
        store=store,
        images=ImageStore(
            settings.media_dir,
            max_pending=settings.max_pending_images,
            max_pending_bytes=settings.max_pending_image_bytes,
        ),
        geocoder=geocoder or NominatimGeocoder.from_settings(settings),
    )


def create_application(
    settings: Optional[Settings] = None,
    storage: Optional[StorageBackend] = None,
    geocoder: Optional[Geocoder] = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        description="Searchable profile directory with address maps.",
        version=app_version,
    )
    app.state.services = build_services(settings, storage=storage, geocoder=geocoder)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": "validation_error", "details": exc.errors()},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload = detail
        else:
            payload = {"error": "http_error", "details": detail}
        return JSONResponse(status_code=exc.status_code, content=payload)

    @app.exception_handler(DirectoryError)
    async def directory_exception_handler(
        request: Request, exc: DirectoryError
    ) -> JSONResponse:
        status_code = _ERROR_STATUS.get(type(exc), 500)
        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"error": exc.error_code, "message": str(exc)},
        )

    @app.get("/healthz", tags=["health"])
    async def healthz() -> dict[str, Any]:
        return {
            "status": "ok",
            "version": app_version,
            "storage": settings.storage_backend,
            "profiles": len(app.state.services.store.list()),
        }

    app.include_router(router)
    return app


app = create_application()
