"""Puzzle artwork: the preset catalog and uploaded-image records."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from backend.models.store import (
    JsonRecordFile,
    format_timestamp,
    parse_timestamp,
    utcnow,
)

logger = logging.getLogger(__name__)

_UNSPLASH = "https://images.unsplash.com/{photo}?ixlib=rb-4.0.3&auto=format&fit=crop&w={px}&h={px}"


@dataclass(frozen=True)
class PresetImage:
    id: str
    name: str
    url: str
    thumbnail: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "url": self.url, "thumbnail": self.thumbnail}


def _preset(id: str, name: str, photo: str) -> PresetImage:
    return PresetImage(
        id=id,
        name=name,
        url=_UNSPLASH.format(photo=photo, px=400),
        thumbnail=_UNSPLASH.format(photo=photo, px=200),
    )


PRESET_IMAGES: tuple[PresetImage, ...] = (
    _preset("landscape", "Mountain Lake", "photo-1506905925346-21bda4d32df4"),
    _preset("cityscape", "City Skyline", "photo-1449824913935-59a10b8d2000"),
    _preset("ocean", "Tropical Beach", "photo-1559827260-dc66d52bef19"),
    _preset("forest", "Pine Forest", "photo-1542273917363-3b1817f69a2d"),
)

DEFAULT_IMAGE = PRESET_IMAGES[0].url


@dataclass(frozen=True)
class NewCustomImage:
    file_name: str
    original_name: str
    processed_path: str


@dataclass(frozen=True)
class CustomImageRecord:
    id: str
    file_name: str
    original_name: str
    processed_path: str
    uploaded_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "originalName": self.original_name,
            "processedPath": self.processed_path,
            "uploadedAt": format_timestamp(self.uploaded_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CustomImageRecord:
        return cls(
            id=str(data["id"]),
            file_name=data["fileName"],
            original_name=data["originalName"],
            processed_path=data["processedPath"],
            uploaded_at=parse_timestamp(data.get("uploadedAt")) or utcnow(),
        )

    @classmethod
    def create(cls, image: NewCustomImage) -> CustomImageRecord:
        return cls(
            id=str(uuid.uuid4()),
            file_name=image.file_name,
            original_name=image.original_name,
            processed_path=image.processed_path,
        )


class ImageStore(Protocol):
    def save(self, image: NewCustomImage) -> CustomImageRecord: ...

    def list(self) -> list[CustomImageRecord]: ...

    def get(self, image_id: str) -> CustomImageRecord | None: ...


def _newest_first(records: list[CustomImageRecord]) -> list[CustomImageRecord]:
    return sorted(records, key=lambda r: r.uploaded_at, reverse=True)


class MemoryImageStore:
    def __init__(self) -> None:
        self._records: dict[str, CustomImageRecord] = {}

    def save(self, image: NewCustomImage) -> CustomImageRecord:
        record = CustomImageRecord.create(image)
        self._records[record.id] = record
        return record

    def list(self) -> list[CustomImageRecord]:
        return _newest_first(list(self._records.values()))

    def get(self, image_id: str) -> CustomImageRecord | None:
        return self._records.get(image_id)


class JsonImageStore:
    """Uploaded-image records kept in a JSON file next to the uploads."""

    def __init__(self, filepath: Path) -> None:
        self._file = JsonRecordFile(filepath)

    def _load(self) -> list[CustomImageRecord]:
        return self._file.load_records(CustomImageRecord.from_dict)

    def save(self, image: NewCustomImage) -> CustomImageRecord:
        record = CustomImageRecord.create(image)
        with self._file.locked():
            records = self._load()
            records.append(record)
            self._file.save([r.to_dict() for r in records])
        logger.info("Stored custom image %s (%s)", record.file_name, record.original_name)
        return record

    def list(self) -> list[CustomImageRecord]:
        return _newest_first(self._load())

    def get(self, image_id: str) -> CustomImageRecord | None:
        return next((r for r in self._load() if r.id == image_id), None)
