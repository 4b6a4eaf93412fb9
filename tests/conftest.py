"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator

import pytest

from chessarbiter.core.board import Board
from chessarbiter.core.enums import Color
from chessarbiter.core.types import parse_square
from chessarbiter.game.controller import GameController

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for Qt tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def ctrl() -> GameController:
    """Fresh game from the standard starting position."""
    return GameController()


@pytest.fixture
def play() -> Callable[..., None]:
    """Play coordinate moves like ``"e2e4"``; fails the test if one is illegal."""

    def _play(game: GameController, *moves: str) -> None:
        for text in moves:
            move = game.move_for(parse_square(text[:2]), parse_square(text[2:4]))
            assert move is not None, f"{text} is not legal here"
            game.apply_move(move)

    return _play


@pytest.fixture
def make_game() -> Callable[..., GameController]:
    """Factory: controller started from a ``{"e1": "K", ...}`` placement."""

    def _make(
        placement: dict[str, str],
        side_to_move: Color = Color.WHITE,
        **kwargs: object,
    ) -> GameController:
        return GameController.from_board(
            Board.from_pieces(placement), side_to_move, **kwargs
        )

    return _make
