from backend.models.board import Board, Difficulty, Direction, Tile
from backend.models.history import (
    GameHistoryRecord,
    HistoryStore,
    JsonHistoryStore,
    MemoryHistoryStore,
    NewGameHistory,
)
from backend.models.images import (
    PRESET_IMAGES,
    CustomImageRecord,
    ImageStore,
    JsonImageStore,
    MemoryImageStore,
    NewCustomImage,
    PresetImage,
)

__all__ = [
    "Board",
    "CustomImageRecord",
    "Difficulty",
    "Direction",
    "GameHistoryRecord",
    "HistoryStore",
    "ImageStore",
    "JsonHistoryStore",
    "JsonImageStore",
    "MemoryHistoryStore",
    "MemoryImageStore",
    "NewCustomImage",
    "NewGameHistory",
    "PRESET_IMAGES",
    "PresetImage",
    "Tile",
]
