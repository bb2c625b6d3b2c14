"""Board model for the sliding puzzle game."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum

from backend.errors import BoardInvariantError

EMPTY_ID = 0


class Direction(StrEnum):
    """The direction a *tile* slides (not the gap)."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Difficulty(StrEnum):
    EASY = "3x3"
    MEDIUM = "4x4"
    HARD = "5x5"

    @property
    def grid_size(self) -> int:
        return int(self.value.split("x", 1)[0])

    @property
    def label(self) -> str:
        return f"{self.grid_size}×{self.grid_size}"

    @classmethod
    def for_size(cls, size: int) -> Difficulty:
        return cls(f"{size}x{size}")


@dataclass(frozen=True)
class Tile:
    """A single puzzle piece.

    ``id`` is the tile's identity (``0`` for the gap); ``position`` is the
    row-major cell it currently occupies.
    """

    id: int
    position: int
    is_empty: bool = False

    def moved_to(self, position: int) -> Tile:
        return replace(self, position=position)


def grid_size_for(count: int) -> int:
    """Return the side length of a square board holding *count* cells."""
    size = math.isqrt(count)
    if size < 2 or size * size != count:
        raise BoardInvariantError(
            f"{count} tiles do not form a square board of side >= 2."
        )
    return size


@dataclass(frozen=True)
class Board:
    """An immutable arrangement of tiles.

    The tuple order is the order tiles were laid out in; the cell a tile
    occupies is its ``position``.  Every change produces a new board.
    """

    tiles: tuple[Tile, ...]

    # -- construction helpers -------------------------------------------------

    @classmethod
    def of(cls, tiles: Iterable[Tile]) -> Board:
        return cls(tiles=tuple(tiles))

    @classmethod
    def from_ids(cls, ids: Sequence[int]) -> Board:
        """Create a board from tile ids listed in row-major position order.

        Example::

            Board.from_ids([1, 2, 3, 4, 5, 6, 7, 0, 8])
        """
        board = cls(
            tiles=tuple(
                Tile(id=tid, position=pos, is_empty=tid == EMPTY_ID)
                for pos, tid in enumerate(ids)
            )
        )
        board.validate()
        return board

    # -- sequence protocol ----------------------------------------------------

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def __getitem__(self, index: int) -> Tile:
        return self.tiles[index]

    # -- queries --------------------------------------------------------------

    @property
    def size(self) -> int:
        return grid_size_for(len(self.tiles))

    @property
    def empty_tile(self) -> Tile | None:
        return next((t for t in self.tiles if t.is_empty), None)

    def find(self, tile_id: int) -> Tile | None:
        return next((t for t in self.tiles if t.id == tile_id), None)

    def tile_at(self, position: int) -> Tile | None:
        return next((t for t in self.tiles if t.position == position), None)

    def by_position(self) -> dict[int, Tile]:
        return {t.position: t for t in self.tiles}

    def ids(self) -> list[int]:
        """Tile ids read in position order (``0`` for the gap)."""
        return [t.id for t in sorted(self.tiles, key=lambda t: t.position)]

    def is_tile_correct(self, position: int) -> bool:
        """Check if the tile at *position* is in its goal cell."""
        tile = self.tile_at(position)
        if tile is None:
            return False
        if tile.is_empty:
            return position == len(self.tiles) - 1
        return tile.id == position + 1

    # -- transformations ------------------------------------------------------

    def swapped(self, tile_id: int, other_id: int) -> Board:
        """Return a new board with the two tiles' positions exchanged."""
        a = self.find(tile_id)
        b = self.find(other_id)
        if a is None or b is None:
            raise KeyError(tile_id if a is None else other_id)
        return Board(
            tiles=tuple(
                t.moved_to(b.position) if t.id == a.id
                else t.moved_to(a.position) if t.id == b.id
                else t
                for t in self.tiles
            )
        )

    def resequenced(self) -> Board:
        """Return a board whose tiles sit at their tuple index."""
        return Board(tiles=tuple(t.moved_to(i) for i, t in enumerate(self.tiles)))

    # -- invariants -----------------------------------------------------------

    def validate(self) -> None:
        """Raise ``BoardInvariantError`` unless the board is well formed."""
        count = len(self.tiles)
        grid_size_for(count)

        empties = sum(1 for t in self.tiles if t.is_empty)
        if empties != 1:
            raise BoardInvariantError(f"Expected exactly one empty tile, got {empties}.")

        if sorted(t.position for t in self.tiles) != list(range(count)):
            raise BoardInvariantError("Tile positions are not a permutation of the cells.")

        ids = sorted(t.id for t in self.tiles)
        if ids != list(range(count)):
            raise BoardInvariantError(f"Tile ids must be 0..{count - 1}, got {ids}.")

        for t in self.tiles:
            if t.is_empty != (t.id == EMPTY_ID):
                raise BoardInvariantError(f"Tile {t.id} has an inconsistent empty flag.")
