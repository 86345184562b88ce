"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Request, Response, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from photo_gallery.api.models import (
    DeletePhotoRequest,
    ErrorResponse,
    PhotoListResponse,
    PhotoMutationResponse,
)
from photo_gallery.app_logging import configure_logging, log_request
from photo_gallery.containers import AppContainer
from photo_gallery.domain.photos import (
    NotFoundError,
    StorageError,
    UploadedFile,
    ValidationError,
)

INTERNAL_ERROR_MESSAGE = "Internal server error"
INVALID_REQUEST_MESSAGE = "Invalid request body"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    settings = container.settings
    configure_logging(settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Serving photos from %s, records in %s",
            settings.photo_dir,
            settings.db_file,
        )
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.middleware("http")
    async def access_log(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        log_request(request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(status.HTTP_404_NOT_FOUND, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request to %s", request.url.path)
        return _error_response(status.HTTP_400_BAD_REQUEST, INVALID_REQUEST_MESSAGE)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError) -> JSONResponse:
        logger.exception("Storage failure on %s", request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s", request.url.path)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/", include_in_schema=False)
    async def landing() -> RedirectResponse:
        """Send browsers to the static landing page."""
        return RedirectResponse(
            settings.landing_page, status_code=status.HTTP_302_FOUND
        )

    @app.get("/api/photos")
    async def list_photos(request: Request) -> PhotoListResponse:
        """Return all stored photo URLs."""
        state_container: AppContainer = request.app.state.container
        return PhotoListResponse(photos=state_container.photo_service.list_photos())

    @app.post("/api/photos")
    async def upload_photos(
        request: Request,
        photos: list[UploadFile] | None = File(default=None),  # noqa: B008
    ) -> PhotoMutationResponse:
        """Store uploaded images and append them to the gallery."""
        state_container: AppContainer = request.app.state.container
        uploads = [await _to_uploaded_file(part) for part in photos or []]
        result = await state_container.photo_service.upload_photos(uploads)
        return PhotoMutationResponse(photos=result.photos)

    @app.post("/api/photos/delete")
    async def delete_photo(
        request: Request, payload: DeletePhotoRequest | None = None
    ) -> PhotoMutationResponse:
        """Remove a photo from the gallery and delete its file."""
        state_container: AppContainer = request.app.state.container
        photo_url = payload.photo_url if payload else None
        photos = await state_container.photo_service.delete_photo(photo_url)
        return PhotoMutationResponse(photos=photos)

    app.mount(
        settings.uploads_url_path,
        StaticFiles(directory=settings.uploads_dir, check_dir=False),
        name="uploads",
    )
    if settings.static_dir.is_dir():
        app.mount(
            "/",
            StaticFiles(directory=settings.static_dir, html=True),
            name="static",
        )
    else:
        logger.info("No front-end directory at %s", settings.static_dir)
    return app


async def _to_uploaded_file(part: UploadFile) -> UploadedFile:
    """Read a multipart part into the domain upload type."""
    content = await part.read()
    await part.close()
    return UploadedFile(
        original_filename=part.filename,
        content_type=part.content_type,
        content=content,
    )


def _error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())
