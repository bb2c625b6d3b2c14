"""Upload validation and square JPEG processing."""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from backend.errors import UploadRejected
from backend.models.images import PRESET_IMAGES
from backend.services.imaging import (
    CUSTOM_LABEL,
    PRESET_LABEL,
    crop_square,
    image_label,
    process_file,
    process_upload,
    resolve_local,
    validate_upload,
)


def _png(width: int = 800, height: int = 600, colour: str = "orange") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), colour).save(buf, "PNG")
    return buf.getvalue()


# -- validation ---------------------------------------------------------------


def test_missing_file_is_rejected() -> None:
    with pytest.raises(UploadRejected, match="No image file provided") as exc:
        validate_upload(None, "image/png", 10)
    assert exc.value.status == 400


def test_non_image_is_rejected() -> None:
    with pytest.raises(UploadRejected, match="Only image files are allowed"):
        validate_upload("notes.txt", "text/plain", 10)


def test_content_type_guessed_from_name() -> None:
    validate_upload("photo.png", None, 10)
    validate_upload("photo.jpg", "application/octet-stream", 10)
    with pytest.raises(UploadRejected):
        validate_upload("archive.zip", None, 10)


def test_oversize_upload_is_413() -> None:
    with pytest.raises(UploadRejected) as exc:
        validate_upload("big.png", "image/png", 6 * 1024 * 1024)
    assert exc.value.status == 413


# -- processing ---------------------------------------------------------------


def test_crop_square() -> None:
    img = Image.new("RGB", (300, 100), "blue")
    out = crop_square(img, 50)
    assert out.size == (50, 50)
    assert out.mode == "RGB"


def test_process_upload_writes_square_jpeg(tmp_path: Path) -> None:
    uploads = tmp_path / "uploads"
    result = process_upload(_png(), "holiday.png", uploads)

    assert result.original_name == "holiday.png"
    assert result.file_name.endswith(".jpg")
    assert result.processed_path == f"/uploads/{result.file_name}"
    with Image.open(uploads / result.file_name) as img:
        assert img.format == "JPEG"
        assert img.size == (400, 400)


def test_process_upload_custom_size(tmp_path: Path) -> None:
    result = process_upload(_png(120, 90), "small.png", tmp_path, size=64, quality=70)
    with Image.open(tmp_path / result.file_name) as img:
        assert img.size == (64, 64)


def test_each_upload_gets_a_new_name(tmp_path: Path) -> None:
    a = process_upload(_png(), "x.png", tmp_path)
    b = process_upload(_png(), "x.png", tmp_path)
    assert a.file_name != b.file_name


def test_undecodable_upload_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(UploadRejected, match="Could not read image"):
        process_upload(b"definitely not a png", "fake.png", tmp_path)
    assert not any(tmp_path.iterdir())


def test_process_file(tmp_path: Path) -> None:
    src = tmp_path / "dropped.png"
    src.write_bytes(_png(500, 700))
    result = process_file(src, tmp_path / "uploads", size=100)
    assert (tmp_path / "uploads" / result.file_name).is_file()


def test_process_file_rejects_text(tmp_path: Path) -> None:
    src = tmp_path / "readme.txt"
    src.write_text("hello")
    with pytest.raises(UploadRejected):
        process_file(src, tmp_path / "uploads")


# -- references ---------------------------------------------------------------


def test_resolve_local(tmp_path: Path) -> None:
    (tmp_path / "a.jpg").write_bytes(b"x")
    assert resolve_local("/uploads/a.jpg", tmp_path) == tmp_path / "a.jpg"
    assert resolve_local("/uploads/missing.jpg", tmp_path) is None
    assert resolve_local(PRESET_IMAGES[0].url, tmp_path) is None
    assert resolve_local(str(tmp_path / "a.jpg"), tmp_path / "elsewhere") == tmp_path / "a.jpg"


def test_image_label(tmp_path: Path) -> None:
    assets = tmp_path / "assets"
    assert image_label(PRESET_IMAGES[2].url) == PRESET_LABEL
    assert image_label(PRESET_IMAGES[2].thumbnail) == PRESET_LABEL
    assert image_label(str(assets / "images" / "fox.png"), assets) == PRESET_LABEL
    assert image_label("/uploads/123-abc.jpg", assets) == CUSTOM_LABEL
    assert image_label(str(tmp_path / "mine.png"), assets) == CUSTOM_LABEL
