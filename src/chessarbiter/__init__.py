"""chessarbiter — an authoritative, presentation-free chess rules engine."""

from chessarbiter.core import (
    Board,
    Color,
    Move,
    MoveFlag,
    Piece,
    PieceType,
    TerminalReason,
    parse_square,
    square_name,
)
from chessarbiter.game import GameController, GameOptions, GameSnapshot, GameStatus

__version__ = "0.1.0"

__all__ = [
    "Board",
    "Color",
    "GameController",
    "GameOptions",
    "GameSnapshot",
    "GameStatus",
    "Move",
    "MoveFlag",
    "Piece",
    "PieceType",
    "TerminalReason",
    "parse_square",
    "square_name",
]
