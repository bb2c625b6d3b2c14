"""Game history records and stores."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

import pytest

from backend.errors import PersistenceError
from backend.models.history import (
    GameHistoryRecord,
    JsonHistoryStore,
    MemoryHistoryStore,
    NewGameHistory,
)


def _record(id: str, day: int, moves: int = 10) -> dict:
    return {
        "id": id,
        "imageName": "Preset Image",
        "moves": moves,
        "timeElapsed": 42,
        "difficulty": "3x3",
        "completedAt": datetime(2024, 5, day, 12, 0, tzinfo=timezone.utc).isoformat(),
    }


# -- JSON file store ----------------------------------------------------------


def test_missing_file_is_empty(tmp_path: Path) -> None:
    store = JsonHistoryStore(tmp_path / "history.json")
    assert store.list() == []


def test_save_then_list(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "history.json"
    store = JsonHistoryStore(path)
    saved = store.save(NewGameHistory("Custom Image", moves=31, time_elapsed=95, difficulty="4x4"))

    assert saved.id
    assert saved.completed_at.tzinfo is not None
    assert store.list() == [saved]

    on_disk = json.loads(path.read_text())
    assert on_disk[0]["imageName"] == "Custom Image"
    assert on_disk[0]["timeElapsed"] == 95
    assert on_disk[0]["difficulty"] == "4x4"


def test_list_is_newest_first_and_limited(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.write_text(json.dumps([_record("a", 1), _record("c", 3), _record("b", 2)]))
    store = JsonHistoryStore(path)

    assert [r.id for r in store.list()] == ["c", "b", "a"]
    assert [r.id for r in store.list(2)] == ["c", "b"]


def test_save_appends_to_existing_records(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    path.write_text(json.dumps([_record("old", 1)]))
    store = JsonHistoryStore(path)
    new = store.save(NewGameHistory("Preset Image", 5, 9))

    assert [r.id for r in store.list()] == [new.id, "old"]


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}'])
def test_unreadable_file_raises(tmp_path: Path, content: str) -> None:
    path = tmp_path / "history.json"
    path.write_text(content)
    store = JsonHistoryStore(path)

    with pytest.raises(PersistenceError):
        store.list()
    with pytest.raises(PersistenceError):
        store.save(NewGameHistory("Preset Image", 1, 1))


def test_concurrent_saves_are_all_kept(tmp_path: Path) -> None:
    path = tmp_path / "history.json"

    def play(worker: int) -> list[str]:
        store = JsonHistoryStore(path)
        return [
            store.save(NewGameHistory("Preset Image", worker, n)).id for n in range(10)
        ]

    with ThreadPoolExecutor(max_workers=16) as pool:
        saved = [rid for ids in pool.map(play, range(16)) for rid in ids]

    kept = JsonHistoryStore(path).list(limit=1000)
    assert len(saved) == 160
    assert {r.id for r in kept} == set(saved)
    assert not list(tmp_path.glob("*.tmp"))


@pytest.mark.parametrize(
    "records",
    [
        [{"id": "x"}],
        [{**_record("a", 1), "completedAt": "yesterday"}],
        [{**_record("a", 1), "moves": None}],
        ["not a record"],
    ],
)
def test_malformed_record_raises_persistence_error(tmp_path: Path, records: list) -> None:
    path = tmp_path / "history.json"
    path.write_text(json.dumps(records))
    with pytest.raises(PersistenceError):
        JsonHistoryStore(path).list()


def test_naive_timestamps_sort_with_aware_ones(tmp_path: Path) -> None:
    path = tmp_path / "history.json"
    naive = {**_record("naive", 1), "completedAt": "2024-05-09T12:00:00"}
    path.write_text(json.dumps([_record("a", 2), naive, _record("b", 3)]))

    listed = JsonHistoryStore(path).list()
    assert [r.id for r in listed] == ["naive", "b", "a"]
    assert listed[0].completed_at.tzinfo is not None


def test_record_defaults_missing_difficulty() -> None:
    data = _record("x", 4)
    del data["difficulty"]
    record = GameHistoryRecord.from_dict(data)
    assert record.difficulty == "3x3"
    assert record.to_dict()["completedAt"] == data["completedAt"]


# -- in-memory store ----------------------------------------------------------


def test_memory_store_limits() -> None:
    store = MemoryHistoryStore()
    for moves in range(12):
        store.save(NewGameHistory("Preset Image", moves, moves * 2))

    assert len(store.list()) == 10
    assert len(store.list(3)) == 3
    assert len(store.list(100)) == 12
