"""Preset catalog and custom image stores."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from backend.errors import PersistenceError
from backend.models.images import (
    DEFAULT_IMAGE,
    PRESET_IMAGES,
    JsonImageStore,
    MemoryImageStore,
    NewCustomImage,
)


def _new(name: str) -> NewCustomImage:
    return NewCustomImage(
        file_name=f"{name}.jpg",
        original_name=f"{name}.png",
        processed_path=f"/uploads/{name}.jpg",
    )


def test_presets() -> None:
    assert [p.id for p in PRESET_IMAGES] == ["landscape", "cityscape", "ocean", "forest"]
    assert DEFAULT_IMAGE == PRESET_IMAGES[0].url
    for preset in PRESET_IMAGES:
        assert "w=400" in preset.url
        assert "w=200" in preset.thumbnail
        assert set(preset.to_dict()) == {"id", "name", "url", "thumbnail"}


def test_json_store_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "custom_images.json"
    store = JsonImageStore(path)
    record = store.save(_new("cat"))

    assert store.get(record.id) == record
    assert store.get("missing") is None
    assert store.list() == [record]
    assert json.loads(path.read_text())[0]["processedPath"] == "/uploads/cat.jpg"


def test_json_store_lists_newest_first(tmp_path: Path) -> None:
    path = tmp_path / "custom_images.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "old",
                    "fileName": "a.jpg",
                    "originalName": "a.png",
                    "processedPath": "/uploads/a.jpg",
                    "uploadedAt": "2024-01-01T00:00:00+00:00",
                },
                {
                    "id": "new",
                    "fileName": "b.jpg",
                    "originalName": "b.png",
                    "processedPath": "/uploads/b.jpg",
                    "uploadedAt": "2024-02-01T00:00:00+00:00",
                },
            ]
        )
    )
    assert [r.id for r in JsonImageStore(path).list()] == ["new", "old"]


def test_json_store_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "custom_images.json"
    path.write_text("[{")
    with pytest.raises(PersistenceError):
        JsonImageStore(path).list()


def test_json_store_missing_field(tmp_path: Path) -> None:
    path = tmp_path / "custom_images.json"
    path.write_text(json.dumps([{"id": "x", "fileName": "x.jpg"}]))
    store = JsonImageStore(path)
    with pytest.raises(PersistenceError):
        store.list()
    with pytest.raises(PersistenceError):
        store.get("x")


def test_json_store_threads_share_the_file(tmp_path: Path) -> None:
    path = tmp_path / "custom_images.json"
    stores = [JsonImageStore(path) for _ in range(8)]
    threads = [
        threading.Thread(target=lambda s=s, i=i: [s.save(_new(f"{i}-{n}")) for n in range(5)])
        for i, s in enumerate(stores)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(JsonImageStore(path).list()) == 40


def test_memory_store() -> None:
    store = MemoryImageStore()
    a = store.save(_new("a"))
    b = store.save(_new("b"))
    assert store.get(a.id) == a
    assert {r.id for r in store.list()} == {a.id, b.id}
