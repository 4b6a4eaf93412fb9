"""Game management layer — state, controller, options, events.

Quick start::

    from chessarbiter.core import parse_square
    from chessarbiter.game import GameController

    ctrl = GameController()
    move = ctrl.move_for(parse_square("e2"), parse_square("e4"))
    snapshot = ctrl.apply_move(move)
"""

from chessarbiter.game.controller import GameController, GameEvents
from chessarbiter.game.interfaces import (
    GamePhase,
    GameSnapshot,
    GameStatus,
    IGameController,
)
from chessarbiter.game.options import GameOptions
from chessarbiter.game.state import GameState, MoveRecord

__all__ = [
    # Interfaces
    "GamePhase",
    "GameSnapshot",
    "GameStatus",
    "IGameController",
    # Concrete
    "GameController",
    "GameEvents",
    "GameOptions",
    "GameState",
    "MoveRecord",
]
