"""Upload validation and square-crop processing for custom puzzle images."""

from __future__ import annotations

import io
import logging
import mimetypes
import secrets
import time
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from backend.errors import UploadRejected
from backend.models.images import PRESET_IMAGES, NewCustomImage

logger = logging.getLogger(__name__)

Image.MAX_IMAGE_PIXELS = 40_000_000  # guard against decompression bombs

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
PROCESSED_SIZE = 400
JPEG_QUALITY = 90
UPLOADS_URL_PREFIX = "/uploads/"

PRESET_LABEL = "Preset Image"
CUSTOM_LABEL = "Custom Image"


def validate_upload(
    filename: str | None,
    content_type: str | None,
    size: int,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Reject an upload before it is decoded.

    The content type is guessed from *filename* when the client did not
    send one.
    """
    if not filename:
        raise UploadRejected("No image file provided")
    if content_type is None or content_type == "application/octet-stream":
        content_type, _ = mimetypes.guess_type(filename)
    if not content_type or not content_type.startswith("image/"):
        raise UploadRejected("Only image files are allowed")
    if size > max_bytes:
        raise UploadRejected(
            f"Image is larger than {max_bytes // (1024 * 1024)}MB", status=413
        )


def _unique_name() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}.jpg"


def crop_square(img: Image.Image, size: int = PROCESSED_SIZE) -> Image.Image:
    """Centre-crop *img* to a square and scale it to *size* pixels."""
    return ImageOps.fit(
        img.convert("RGB"), (size, size), method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


def process_upload(
    data: bytes,
    original_name: str,
    uploads_dir: Path,
    size: int = PROCESSED_SIZE,
    quality: int = JPEG_QUALITY,
) -> NewCustomImage:
    """Decode, crop and store an uploaded image as a square JPEG.

    Returns the record to hand to an ``ImageStore``.  Undecodable data
    raises ``UploadRejected``; failures writing the file raise ``OSError``.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            processed = crop_square(ImageOps.exif_transpose(img), size)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise UploadRejected("Could not read image. Please try a different file.") from exc

    uploads_dir.mkdir(parents=True, exist_ok=True)
    file_name = _unique_name()
    processed.save(uploads_dir / file_name, "JPEG", quality=quality)
    logger.info("Processed upload %r -> %s", original_name, file_name)

    return NewCustomImage(
        file_name=file_name,
        original_name=original_name,
        processed_path=UPLOADS_URL_PREFIX + file_name,
    )


def process_file(path: Path, uploads_dir: Path, **kwargs: int) -> NewCustomImage:
    """Validate and process an image file from local disk (drag and drop)."""
    stat = path.stat()
    validate_upload(path.name, None, stat.st_size)
    return process_upload(path.read_bytes(), path.name, uploads_dir, **kwargs)


def resolve_local(ref: str, uploads_dir: Path) -> Path | None:
    """Map an image reference to a readable local file, if there is one."""
    if ref.startswith(UPLOADS_URL_PREFIX):
        path = uploads_dir / ref[len(UPLOADS_URL_PREFIX):]
    elif "://" in ref:
        return None
    else:
        path = Path(ref)
    return path if path.is_file() else None


def image_label(ref: str, assets_dir: Path | None = None) -> str:
    """Name stored in the history for the image a game was played with."""
    if any(ref in (p.url, p.thumbnail) for p in PRESET_IMAGES):
        return PRESET_LABEL
    if assets_dir is not None and not ref.startswith(UPLOADS_URL_PREFIX):
        if Path(ref).resolve().is_relative_to(assets_dir.resolve()):
            return PRESET_LABEL
    return CUSTOM_LABEL
