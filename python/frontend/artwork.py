"""Locating and slicing puzzle artwork for the clients."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from backend.config import Settings
from backend.errors import PersistenceError
from backend.models.images import ImageStore
from backend.services.imaging import crop_square, resolve_local

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp")

RGB = tuple[int, int, int]


def available_images(settings: Settings, store: ImageStore | None = None) -> list[str]:
    """References of every image the clients can render locally.

    Bundled assets come first (sorted by name), then uploads, newest first.
    """
    refs: list[str] = []
    if settings.images_dir.is_dir():
        refs.extend(
            str(p) for p in sorted(settings.images_dir.iterdir())
            if p.suffix.lower() in IMAGE_SUFFIXES
        )
    if store is not None:
        try:
            refs.extend(r.processed_path for r in store.list())
        except PersistenceError as exc:
            logger.warning("Could not list custom images: %s", exc)
    return [r for r in refs if resolve_local(r, settings.uploads_dir) is not None]


def load_square(ref: str, settings: Settings, size: int) -> Image.Image | None:
    """Open *ref* as a ``size``-pixel square RGB image, or None if unavailable."""
    path = resolve_local(ref, settings.uploads_dir)
    if path is None:
        return None
    try:
        with Image.open(path) as img:
            return crop_square(img, size)
    except OSError as exc:
        logger.warning("Could not open image %s: %s", path, exc)
        return None


def slice_tiles(img: Image.Image, grid_size: int) -> dict[int, Image.Image]:
    """Cut an image into the pieces for tiles ``1..grid_size²-1``.

    Tile ``v`` shows the piece at its solved cell ``v - 1``.
    """
    pw = img.width // grid_size
    ph = img.height // grid_size
    tiles: dict[int, Image.Image] = {}
    for value in range(1, grid_size * grid_size):
        row, col = divmod(value - 1, grid_size)
        box = (col * pw, row * ph, (col + 1) * pw, (row + 1) * ph)
        tiles[value] = img.crop(box)
    return tiles


def tile_pixels(
    img: Image.Image, grid_size: int, cols: int, rows: int
) -> dict[int, list[list[RGB]]]:
    """Sample each tile's piece down to a ``cols`` x ``rows`` colour grid."""
    scaled = img.convert("RGB").resize(
        (cols * grid_size, rows * grid_size), Image.Resampling.BOX
    )
    out: dict[int, list[list[RGB]]] = {}
    for value, piece in slice_tiles(scaled, grid_size).items():
        out[value] = [
            [piece.getpixel((x, y)) for x in range(cols)] for y in range(rows)
        ]
    return out


def display_name(ref: str) -> str:
    if "://" in ref:
        return "Preset image"
    return Path(ref).stem
