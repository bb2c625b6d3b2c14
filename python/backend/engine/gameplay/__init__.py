from backend.engine.gameplay.game import GamePlay
from backend.engine.gameplay.moves import (
    apply_move,
    is_adjacent,
    movable_tiles,
    tile_in_direction,
)
from backend.engine.gameplay.reducer import (
    AutoSolve,
    ChangeDifficulty,
    Event,
    MoveTile,
    Reset,
    SelectImage,
    Shuffle,
    reduce,
)

__all__ = [
    "AutoSolve",
    "ChangeDifficulty",
    "Event",
    "GamePlay",
    "MoveTile",
    "Reset",
    "SelectImage",
    "Shuffle",
    "apply_move",
    "is_adjacent",
    "movable_tiles",
    "reduce",
    "tile_in_direction",
]
