"""GamePlay: the session holder clients talk to."""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay import GamePlay, MoveTile, Shuffle
from backend.engine.gamesolver import Solver
from backend.engine.gamestate import GameSession, elapsed_seconds, is_ticking
from backend.errors import BoardInvariantError
from backend.models.board import Board, Difficulty, Direction, Tile

ONE_MOVE_LEFT = [1, 2, 3, 4, 5, 6, 7, 0, 8]


def test_new_game_is_idle() -> None:
    game = GamePlay(Difficulty.MEDIUM)
    assert game.size == 4
    assert Solver.is_solved(game.session.tiles)
    assert not game.is_ticking
    assert not game.is_won
    assert game.elapsed_seconds() == 0


def test_shuffle_starts_the_clock(rng: random.Random) -> None:
    game = GamePlay(rng=rng)
    assert game.shuffle(now=100.0)
    assert game.is_ticking
    assert game.elapsed_seconds(now=107.5) == 7


def test_move_by_direction(make_session) -> None:
    game = GamePlay.from_session(make_session(ONE_MOVE_LEFT, start_time=1.0, is_playing=True))
    assert not game.move(Direction.UP)
    assert game.move(Direction.LEFT, now=2.0)
    assert game.is_won


def test_illegal_move_reports_false(make_session) -> None:
    game = GamePlay.from_session(make_session(ONE_MOVE_LEFT))
    assert not game.move_tile(1)
    assert game.session.moves == 0


def test_clock_freezes_on_win(make_session) -> None:
    game = GamePlay.from_session(make_session(ONE_MOVE_LEFT, start_time=100.0, is_playing=True))
    game.move_tile(8, now=130.0)

    assert game.is_won
    assert not game.is_ticking
    assert game.elapsed_seconds(now=500.0) == 30
    assert elapsed_seconds(game.session) == 30


def test_subscribers_see_each_change(rng: random.Random) -> None:
    game = GamePlay(rng=rng)
    seen: list[tuple[GameSession, GameSession, object]] = []
    game.subscribe(lambda old, new, event: seen.append((old, new, event)))

    game.shuffle(now=5.0)
    assert len(seen) == 1
    old, new, event = seen[0]
    assert isinstance(event, Shuffle)
    assert not is_ticking(old)
    assert is_ticking(new)
    assert new is game.session


def test_no_notification_without_change(make_session) -> None:
    game = GamePlay.from_session(make_session(ONE_MOVE_LEFT))
    events: list[object] = []
    game.subscribe(lambda old, new, event: events.append(event))

    game.move_tile(1)
    game.select_image(game.session.current_image)
    assert events == []

    game.move_tile(8)
    assert events == [MoveTile(8)]


def test_unsubscribe(rng: random.Random) -> None:
    game = GamePlay(rng=rng)
    calls: list[object] = []
    unsubscribe = game.subscribe(lambda *args: calls.append(args))
    unsubscribe()
    unsubscribe()
    game.shuffle()
    assert calls == []


def test_solve_reset_and_difficulty(rng: random.Random) -> None:
    game = GamePlay(rng=rng)
    game.shuffle()
    assert game.solve()
    assert game.is_won
    assert not game.is_ticking

    assert game.reset()
    assert not game.is_won
    assert not game.reset()

    assert game.set_difficulty(Difficulty.HARD)
    assert game.size == 5
    assert len(game.session.tiles) == 25


def test_from_session_rejects_broken_board() -> None:
    broken = Board.of([Tile(1, 0), Tile(2, 1), Tile(3, 2), Tile(4, 3)])
    with pytest.raises(BoardInvariantError):
        GamePlay.from_session(GameSession(tiles=broken))
