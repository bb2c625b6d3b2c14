"""Shared fixtures for the test suite."""

from __future__ import annotations

import random
from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from backend.config import Settings
from backend.engine.gamestate import GameSession
from backend.models.board import Board, Difficulty

SessionFactory = Callable[..., GameSession]


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so shuffles are reproducible."""
    return random.Random(20240601)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with every writable path under the test's tmp dir."""
    return Settings(
        data_dir=tmp_path / "data",
        assets_dir=tmp_path / "assets",
        uploads_dir=tmp_path / "data" / "uploads",
    )


@pytest.fixture
def make_session() -> SessionFactory:
    """Build a session from row-major tile ids (``0`` is the gap)."""

    def _make(ids: Sequence[int], **changes: object) -> GameSession:
        board = Board.from_ids(ids)
        session = GameSession(tiles=board, difficulty=Difficulty.for_size(board.size))
        return session.evolve(**changes) if changes else session

    return _make
