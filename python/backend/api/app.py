"""
FastAPI application: game history, preset images and custom uploads.

Endpoints:
    GET    /api/health              Liveness probe
    GET    /api/preset-images       Preset puzzle images
    GET    /api/game-history        Recent completed games, newest first
    POST   /api/game-history        Record a completed game
    POST   /api/upload-image        Upload an image (multipart field "image")
    GET    /api/custom-images       Uploaded images, newest first
    GET    /uploads/{name}          Processed upload file

Errors are returned as ``{"error": "<message>"}``.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO

from fastapi import Body, FastAPI, File, Query, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pydantic import ValidationError

from backend.api.schemas import (
    CustomImageOut,
    ErrorResponse,
    GameHistoryIn,
    GameHistoryOut,
    HealthResponse,
    PresetImageOut,
)
from backend.config import Settings
from backend.errors import PersistenceError, UploadRejected
from backend.models.history import HistoryStore, JsonHistoryStore, NewGameHistory
from backend.models.images import PRESET_IMAGES, ImageStore, JsonImageStore
from backend.services.imaging import process_upload, validate_upload

logger = logging.getLogger(__name__)


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def read_capped(stream: BinaryIO, limit: int) -> bytes:
    """Read at most one byte past *limit*, enough to tell an oversized upload."""
    return stream.read(limit + 1)


def create_app(
    settings: Settings | None = None,
    history: HistoryStore | None = None,
    images: ImageStore | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Runtime settings (read from the environment if omitted)
        history: History store (JSON file under ``data_dir`` if omitted)
        images: Image store (JSON file under ``data_dir`` if omitted)

    Returns:
        FastAPI application instance
    """
    settings = settings or Settings.from_env()
    history = history if history is not None else JsonHistoryStore(settings.history_path)
    images = images if images is not None else JsonImageStore(settings.images_path)
    uploads_dir = settings.uploads_dir

    app = FastAPI(
        title="SlideQuest API",
        description="Game history and puzzle images for the sliding puzzle",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return _error(400, "Invalid request")

    errors: dict[int | str, dict[str, Any]] = {
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    }

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse()

    @app.get("/api/preset-images", response_model=list[PresetImageOut])
    def preset_images() -> list[PresetImageOut]:
        return [PresetImageOut.model_validate(p) for p in PRESET_IMAGES]

    @app.get("/api/game-history", response_model=list[GameHistoryOut], responses=errors)
    def game_history(limit: int = Query(settings.history_limit, ge=1, le=100)) -> Any:
        try:
            records = history.list(limit)
        except PersistenceError:
            logger.exception("Failed to fetch game history")
            return _error(500, "Failed to fetch game history")
        return [GameHistoryOut.model_validate(r) for r in records]

    @app.post("/api/game-history", response_model=GameHistoryOut, responses=errors)
    def save_game(payload: Any = Body(...)) -> Any:
        try:
            game = GameHistoryIn.model_validate(payload)
        except ValidationError:
            return _error(400, "Invalid game data")
        try:
            record = history.save(
                NewGameHistory(
                    image_name=game.image_name,
                    moves=game.moves,
                    time_elapsed=game.time_elapsed,
                    difficulty=game.difficulty.value,
                )
            )
        except PersistenceError:
            logger.exception("Failed to save game history")
            return _error(500, "Failed to save game history")
        return GameHistoryOut.model_validate(record)

    @app.post(
        "/api/upload-image",
        response_model=CustomImageOut,
        responses={**errors, 413: {"model": ErrorResponse}},
    )
    def upload_image(image: UploadFile | None = File(None)) -> Any:
        if image is None:
            return _error(400, "No image file provided")
        data = read_capped(image.file, settings.max_upload_bytes)
        try:
            validate_upload(
                image.filename, image.content_type, len(data), settings.max_upload_bytes
            )
            processed = process_upload(
                data,
                image.filename or "upload",
                uploads_dir,
                size=settings.image_size,
                quality=settings.jpeg_quality,
            )
        except UploadRejected as exc:
            return _error(exc.status, exc.message)
        except OSError:
            logger.exception("Image upload error")
            return _error(500, "Failed to process image")

        try:
            record = images.save(processed)
        except PersistenceError:
            logger.exception("Image upload error")
            return _error(500, "Failed to process image")
        return CustomImageOut.model_validate(record)

    @app.get("/api/custom-images", response_model=list[CustomImageOut], responses=errors)
    def custom_images() -> Any:
        try:
            records = images.list()
        except PersistenceError:
            logger.exception("Failed to fetch custom images")
            return _error(500, "Failed to fetch custom images")
        return [CustomImageOut.model_validate(r) for r in records]

    @app.get("/uploads/{name}", response_model=None)
    def uploaded_file(name: str) -> FileResponse | JSONResponse:
        path = uploads_dir / name
        if "/" in name or "\\" in name or name.startswith(".") or not path.is_file():
            return _error(404, "Image not found")
        return FileResponse(path, media_type="image/jpeg")

    return app
