"""Completed-game history records and their stores."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Protocol

from backend.models.board import Difficulty
from backend.models.store import (
    JsonRecordFile,
    format_timestamp,
    parse_timestamp,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class NewGameHistory:
    """A won game waiting to be stored."""

    image_name: str
    moves: int
    time_elapsed: int
    difficulty: str = Difficulty.EASY.value


@dataclass(frozen=True)
class GameHistoryRecord:
    id: str
    image_name: str
    moves: int
    time_elapsed: int
    difficulty: str
    completed_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "imageName": self.image_name,
            "moves": self.moves,
            "timeElapsed": self.time_elapsed,
            "difficulty": self.difficulty,
            "completedAt": format_timestamp(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameHistoryRecord:
        return cls(
            id=str(data["id"]),
            image_name=data["imageName"],
            moves=int(data["moves"]),
            time_elapsed=int(data["timeElapsed"]),
            difficulty=data.get("difficulty") or Difficulty.EASY.value,
            completed_at=parse_timestamp(data.get("completedAt")) or utcnow(),
        )

    @classmethod
    def create(cls, game: NewGameHistory) -> GameHistoryRecord:
        return cls(
            id=str(uuid.uuid4()),
            image_name=game.image_name,
            moves=game.moves,
            time_elapsed=game.time_elapsed,
            difficulty=game.difficulty or Difficulty.EASY.value,
        )


class HistoryStore(Protocol):
    def save(self, game: NewGameHistory) -> GameHistoryRecord: ...

    def list(self, limit: int = DEFAULT_LIMIT) -> list[GameHistoryRecord]: ...


def _newest_first(
    records: list[GameHistoryRecord], limit: int
) -> list[GameHistoryRecord]:
    ordered = sorted(records, key=lambda r: r.completed_at, reverse=True)
    return ordered[: max(0, limit)]


class MemoryHistoryStore:
    """Process-lifetime history, lost on exit."""

    def __init__(self) -> None:
        self._records: dict[str, GameHistoryRecord] = {}

    def save(self, game: NewGameHistory) -> GameHistoryRecord:
        record = GameHistoryRecord.create(game)
        self._records[record.id] = record
        return record

    def list(self, limit: int = DEFAULT_LIMIT) -> list[GameHistoryRecord]:
        return _newest_first(list(self._records.values()), limit)


class JsonHistoryStore:
    """Loads, saves, and queries game history from a JSON file."""

    def __init__(self, filepath: Path) -> None:
        self._file = JsonRecordFile(filepath)

    @property
    def filepath(self) -> Path:
        return self._file.filepath

    def _load(self) -> list[GameHistoryRecord]:
        return self._file.load_records(GameHistoryRecord.from_dict)

    def save(self, game: NewGameHistory) -> GameHistoryRecord:
        record = GameHistoryRecord.create(game)
        with self._file.locked():
            records = self._load()
            records.append(record)
            self._file.save([r.to_dict() for r in records])
        logger.info(
            "Saved %s game: %d moves in %ds", record.difficulty, record.moves,
            record.time_elapsed,
        )
        return record

    def list(self, limit: int = DEFAULT_LIMIT) -> list[GameHistoryRecord]:
        return _newest_first(self._load(), limit)
