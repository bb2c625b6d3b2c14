"""Locating and slicing puzzle artwork."""

from __future__ import annotations

from PIL import Image

from backend.config import Settings
from backend.models.images import PRESET_IMAGES, MemoryImageStore, NewCustomImage
from frontend.artwork import available_images, display_name, load_square, slice_tiles, tile_pixels

RED, GREEN, BLUE = (255, 0, 0), (0, 255, 0), (0, 0, 255)


def _striped(size: int = 30) -> Image.Image:
    """Three vertical bands: red, green, blue."""
    img = Image.new("RGB", (size, size), RED)
    third = size // 3
    img.paste(GREEN, (third, 0, 2 * third, size))
    img.paste(BLUE, (2 * third, 0, size, size))
    return img


def test_slice_tiles_maps_tiles_to_solved_cells() -> None:
    pieces = slice_tiles(_striped(), 3)
    assert sorted(pieces) == list(range(1, 9))
    assert pieces[1].getpixel((0, 0)) == RED
    assert pieces[5].getpixel((0, 0)) == GREEN
    assert pieces[6].getpixel((0, 0)) == BLUE
    assert pieces[8].size == (10, 10)


def test_tile_pixels() -> None:
    grid = tile_pixels(_striped(60), 3, cols=4, rows=2)
    assert len(grid) == 8
    assert len(grid[1]) == 2
    assert len(grid[1][0]) == 4
    assert grid[4][1][3] == RED
    assert grid[2][0][0] == GREEN


def test_available_images(settings: Settings) -> None:
    settings.images_dir.mkdir(parents=True)
    _striped().save(settings.images_dir / "b.png")
    _striped().save(settings.images_dir / "a.jpg")
    (settings.images_dir / "notes.txt").write_text("skip me")

    settings.uploads_dir.mkdir(parents=True)
    _striped().save(settings.uploads_dir / "up.jpg")
    store = MemoryImageStore()
    store.save(NewCustomImage("up.jpg", "holiday.png", "/uploads/up.jpg"))
    store.save(NewCustomImage("gone.jpg", "gone.png", "/uploads/gone.jpg"))

    refs = available_images(settings, store)
    assert refs == [
        str(settings.images_dir / "a.jpg"),
        str(settings.images_dir / "b.png"),
        "/uploads/up.jpg",
    ]


def test_available_images_without_assets(settings: Settings) -> None:
    assert available_images(settings) == []


def test_load_square(settings: Settings) -> None:
    settings.uploads_dir.mkdir(parents=True)
    Image.new("RGB", (90, 30), "white").save(settings.uploads_dir / "wide.png")

    img = load_square("/uploads/wide.png", settings, 24)
    assert img is not None
    assert img.size == (24, 24)
    assert load_square(PRESET_IMAGES[0].url, settings, 24) is None


def test_load_square_unreadable_file(settings: Settings) -> None:
    settings.uploads_dir.mkdir(parents=True)
    (settings.uploads_dir / "bad.jpg").write_bytes(b"nope")
    assert load_square("/uploads/bad.jpg", settings, 24) is None


def test_display_name() -> None:
    assert display_name(PRESET_IMAGES[0].url) == "Preset image"
    assert display_name("/uploads/123-ab.jpg") == "123-ab"
