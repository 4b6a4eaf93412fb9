"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessarbiter.core import MoveGenerator, Position, parse_square

    pos = Position.initial()
    gen = MoveGenerator(pos)
    for move in gen.legal_moves(parse_square("g1")):
        print(move)
"""

from chessarbiter.core.attacks import is_in_check, is_square_attacked
from chessarbiter.core.board import Board
from chessarbiter.core.enums import (
    CastlingRights,
    Color,
    MoveFlag,
    PieceType,
    TerminalReason,
)
from chessarbiter.core.errors import (
    ChessError,
    GameOverError,
    IllegalMoveError,
    InconsistentStateError,
)
from chessarbiter.core.legality import filter_legal, leaves_king_in_check, simulate
from chessarbiter.core.move import Move
from chessarbiter.core.move_generator import MoveGenerator
from chessarbiter.core.piece import PIECE_VALUES, Piece
from chessarbiter.core.position import MoveEffect, Position, PositionKey
from chessarbiter.core.rules import Rules, Terminal
from chessarbiter.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "MoveFlag",
    "PieceType",
    "TerminalReason",
    # Errors
    "ChessError",
    "GameOverError",
    "IllegalMoveError",
    "InconsistentStateError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveEffect",
    "MoveGenerator",
    "PIECE_VALUES",
    "Piece",
    "Position",
    "PositionKey",
    "Rules",
    "Terminal",
    # Attacks / legality
    "filter_legal",
    "is_in_check",
    "is_square_attacked",
    "leaves_king_in_check",
    "simulate",
]
