"""Board and tile model."""

from __future__ import annotations

import pytest

from backend.errors import BoardInvariantError
from backend.models.board import Board, Difficulty, Tile, grid_size_for


def test_from_ids_places_tiles_by_position() -> None:
    board = Board.from_ids([1, 2, 3, 4, 5, 6, 7, 0, 8])
    assert len(board) == 9
    assert board.size == 3
    assert board.tile_at(7).is_empty
    assert board.find(8).position == 8
    assert board.ids() == [1, 2, 3, 4, 5, 6, 7, 0, 8]


def test_empty_tile_is_the_zero_id() -> None:
    board = Board.from_ids([1, 2, 3, 0])
    assert board.empty_tile == Tile(id=0, position=3, is_empty=True)


def test_is_tile_correct() -> None:
    board = Board.from_ids([1, 2, 3, 4, 5, 6, 7, 0, 8])
    assert board.is_tile_correct(0)
    assert board.is_tile_correct(6)
    assert not board.is_tile_correct(7)
    assert not board.is_tile_correct(8)


def test_swapped_returns_new_board() -> None:
    board = Board.from_ids([1, 2, 3, 4, 5, 6, 7, 0, 8])
    moved = board.swapped(8, 0)
    assert moved.ids() == [1, 2, 3, 4, 5, 6, 7, 8, 0]
    assert board.ids() == [1, 2, 3, 4, 5, 6, 7, 0, 8]
    moved.validate()


def test_swapped_unknown_tile_raises() -> None:
    board = Board.from_ids([1, 2, 3, 0])
    with pytest.raises(KeyError):
        board.swapped(9, 0)


def test_ids_follow_position_not_tuple_order() -> None:
    board = Board.of(
        [Tile(id=0, position=3, is_empty=True), Tile(3, 2), Tile(2, 1), Tile(1, 0)]
    )
    assert board.ids() == [1, 2, 3, 0]
    assert board.resequenced().tiles[0].id == 0


@pytest.mark.parametrize(
    "ids",
    [
        [1, 2, 3, 4, 5, 6, 7, 8],  # not square
        [1, 2, 3, 4, 5, 6, 7, 8, 9],  # no gap
        [0, 2, 3, 4, 5, 6, 7, 8, 0],  # two gaps
        [1, 1, 3, 4, 5, 6, 7, 8, 0],  # duplicate id
        [0],  # too small
    ],
)
def test_from_ids_rejects_malformed_boards(ids: list[int]) -> None:
    with pytest.raises(BoardInvariantError):
        Board.from_ids(ids)


def test_validate_rejects_duplicate_positions() -> None:
    board = Board.of([Tile(1, 0), Tile(2, 0), Tile(3, 2), Tile(0, 3, is_empty=True)])
    with pytest.raises(BoardInvariantError):
        board.validate()


def test_validate_rejects_inconsistent_empty_flag() -> None:
    board = Board.of([Tile(1, 0, is_empty=True), Tile(2, 1), Tile(3, 2), Tile(0, 3)])
    with pytest.raises(BoardInvariantError):
        board.validate()


def test_grid_size_for() -> None:
    assert grid_size_for(9) == 3
    assert grid_size_for(25) == 5
    with pytest.raises(BoardInvariantError):
        grid_size_for(10)


def test_difficulty_sizes() -> None:
    assert [d.grid_size for d in Difficulty] == [3, 4, 5]
    assert Difficulty.MEDIUM.label == "4×4"
    assert Difficulty.for_size(5) is Difficulty.HARD
    assert Difficulty("3x3") is Difficulty.EASY
    with pytest.raises(ValueError):
        Difficulty.for_size(6)
