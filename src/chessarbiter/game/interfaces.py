"""Value types and abstract interfaces for the game layer.

Follows Dependency Inversion: presentation code depends on
:class:`IGameController` and the immutable snapshots, never on
:class:`~chessarbiter.game.state.GameState` internals.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessarbiter.core.enums import CastlingRights, Color, PieceType, TerminalReason

if TYPE_CHECKING:
    from chessarbiter.core.board import Board
    from chessarbiter.core.move import Move
    from chessarbiter.core.rules import Terminal
    from chessarbiter.core.types import Square


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    WHITE_TO_MOVE = auto()
    BLACK_TO_MOVE = auto()
    GAME_OVER = auto()

    @classmethod
    def for_turn(cls, color: Color) -> GamePhase:
        return cls.WHITE_TO_MOVE if color == Color.WHITE else cls.BLACK_TO_MOVE


# ── Snapshots handed to collaborators ────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class GameStatus:
    """Compact status for turn indicators and end-of-game messaging."""

    turn: Color
    in_check: bool
    game_over: bool
    terminal_reason: TerminalReason | None = None
    winner: Color | None = None


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Complete, detached copy of the game state after a command.

    ``board`` is a private copy; mutating it does not affect the game.
    """

    board: Board
    side_to_move: Color
    castling: CastlingRights
    en_passant: Square | None
    in_check: bool
    captured_by_white: tuple[PieceType, ...]
    captured_by_black: tuple[PieceType, ...]
    terminal: Terminal | None
    ply_count: int
    last_move: Move | None = None

    @property
    def is_game_over(self) -> bool:
        return self.terminal is not None

    @property
    def phase(self) -> GamePhase:
        if self.terminal is not None:
            return GamePhase.GAME_OVER
        return GamePhase.for_turn(self.side_to_move)


# ── Abstract interfaces ─────────────────────────────────────────────────────


class IGameController(ABC):
    """Query/command surface offered to presentation layers."""

    @abstractmethod
    def legal_moves(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq*; empty if none can move."""

    @abstractmethod
    def apply_move(self, move: Move) -> GameSnapshot:
        """Commit a legal move. Raises ``IllegalMoveError`` otherwise."""

    @abstractmethod
    def status(self) -> GameStatus:
        """Turn, check and terminal status."""

    @abstractmethod
    def captured(self, color: Color) -> list[PieceType]:
        """Piece types captured by *color*, in capture order."""

    @abstractmethod
    def reset(self) -> GameSnapshot:
        """Start over from the standard initial position."""
