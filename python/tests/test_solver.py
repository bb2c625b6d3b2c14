"""Win detection and solvability checks."""

from __future__ import annotations

import random

import pytest

from backend.engine.gamegenerator import GameGenerator
from backend.engine.gamesolver import Solver
from backend.errors import BoardInvariantError
from backend.models.board import Board, Tile

# -- is_solved ----------------------------------------------------------------


def test_is_solved_is_idempotent() -> None:
    shuffled = GameGenerator.generate(4, random.Random(7))
    solved = GameGenerator.solved(4)
    assert Solver.is_solved(shuffled) is Solver.is_solved(shuffled) is False
    assert Solver.is_solved(solved) is Solver.is_solved(solved) is True


@pytest.mark.parametrize("size", [3, 4, 5])
def test_solved_board_is_solved(size: int) -> None:
    assert Solver.is_solved(GameGenerator.solved(size))


def test_tuple_order_does_not_matter() -> None:
    tiles = tuple(reversed(GameGenerator.solved(3).tiles))
    assert Solver.is_solved(tiles)
    assert Solver.is_solved(tiles, 3)


def test_gap_must_be_last() -> None:
    board = Board.from_ids([1, 2, 3, 4, 5, 6, 7, 0, 8])
    assert not Solver.is_solved(board)


def test_gap_first_is_not_solved() -> None:
    board = Board.from_ids([0, 1, 2, 3, 4, 5, 6, 7, 8])
    assert not Solver.is_solved(board)


def test_two_swapped_tiles_are_not_solved() -> None:
    board = Board.from_ids([2, 1, 3, 4, 5, 6, 7, 8, 0])
    assert not Solver.is_solved(board)


def test_missing_cell_is_not_solved() -> None:
    tiles = [Tile(id=i, position=i - 1) for i in range(1, 9)]
    assert not Solver.is_solved(tiles, 3)


def test_non_square_count_raises() -> None:
    tiles = [Tile(id=i, position=i - 1) for i in range(1, 8)]
    tiles.append(Tile(id=0, position=7, is_empty=True))
    with pytest.raises(BoardInvariantError):
        Solver.is_solved(tiles)


# -- count_inversions ---------------------------------------------------------


def test_inversions_of_solved_layout() -> None:
    assert Solver.count_inversions([1, 2, 3, 4, 5, 6, 7, 8, 0]) == 0


def test_inversions_ignore_gap() -> None:
    assert Solver.count_inversions([0, 1, 2, 3, 4, 5, 6, 7, 8]) == 0
    assert Solver.count_inversions([1, 2, 3, 4, 5, 6, 8, 7, 0]) == 1


def test_inversions_of_reversed_layout() -> None:
    # 8 tiles fully reversed: 8 * 7 / 2 pairs
    assert Solver.count_inversions([8, 7, 6, 5, 4, 3, 2, 1, 0]) == 28


# -- is_solvable --------------------------------------------------------------


def test_odd_width_swapped_pair_is_unsolvable() -> None:
    assert not Solver.is_solvable([1, 2, 3, 4, 5, 6, 8, 7, 0])


def test_odd_width_even_inversions_are_solvable() -> None:
    assert Solver.is_solvable([1, 2, 3, 4, 5, 6, 7, 8, 0])
    assert Solver.is_solvable([2, 1, 3, 5, 4, 6, 7, 8, 0], 3)


def test_even_width_swapped_pair_is_unsolvable() -> None:
    ids = list(range(1, 14)) + [15, 14, 0]
    assert not Solver.is_solvable(ids, 4)


def test_even_width_counts_gap_row() -> None:
    # Tile 12 slid down from the solved layout: 3 inversions, gap one row up.
    ids = list(range(1, 12)) + [0, 13, 14, 15, 12]
    assert Solver.count_inversions(ids) == 3
    assert Solver.is_solvable(ids, 4)


def test_wrong_length_raises() -> None:
    with pytest.raises(BoardInvariantError):
        Solver.is_solvable([1, 2, 3, 0], 3)


def test_even_width_without_gap_raises() -> None:
    with pytest.raises(BoardInvariantError):
        Solver.is_solvable(list(range(1, 17)), 4)
