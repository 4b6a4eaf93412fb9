"""Game state — the authoritative position plus everything derived from play."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chessarbiter.core.attacks import is_in_check
from chessarbiter.core.enums import Color, PieceType
from chessarbiter.core.move import Move
from chessarbiter.core.move_generator import MoveGenerator
from chessarbiter.core.piece import Piece
from chessarbiter.core.position import Position, PositionKey
from chessarbiter.core.rules import Rules, Terminal
from chessarbiter.core.types import Square
from chessarbiter.game.interfaces import GamePhase, GameSnapshot
from chessarbiter.game.options import GameOptions

_LOGGER = logging.getLogger(__name__)


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    piece: Piece
    captured: PieceType | None = None
    promoted: bool = False
    gave_check: bool = False


@dataclass
class GameState:
    """Position, capture lists, repetition table and terminal status.

    This is a pure data/logic class — no threading, no UI. It does not
    validate moves; :class:`~chessarbiter.game.controller.GameController`
    does that before calling :meth:`apply_move`.
    """

    position: Position = field(default_factory=Position.initial)
    options: GameOptions = field(default_factory=GameOptions)
    captured_by_white: list[PieceType] = field(default_factory=list)
    captured_by_black: list[PieceType] = field(default_factory=list)
    position_counts: dict[PositionKey, int] = field(default_factory=dict)
    terminal: Terminal | None = None
    move_history: list[MoveRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.position_counts:
            self.position_counts[self.position.key()] = 1
        # A custom start position may already be decided.
        if self.terminal is None:
            self.terminal = self._evaluate(self.repetition_count())

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(self, move: Move) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for legality check.
        """
        mover = self.position.side_to_move
        effect = self.position.make_move(move)

        captured = effect.captured.piece_type if effect.captured is not None else None
        if captured is not None:
            self.captured(mover).append(captured)

        key = self.position.key()
        self.position_counts[key] = self.position_counts.get(key, 0) + 1

        record = MoveRecord(
            move=move,
            piece=effect.piece,
            captured=captured,
            promoted=effect.promoted,
            gave_check=self.in_check,
        )
        self.move_history.append(record)

        self.terminal = self._evaluate(self.position_counts[key])
        if self.terminal is not None:
            _LOGGER.info("Game over after %d plies: %s", self.ply_count, self.terminal)
        return record

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def phase(self) -> GamePhase:
        if self.terminal is not None:
            return GamePhase.GAME_OVER
        return GamePhase.for_turn(self.side_to_move)

    @property
    def is_game_over(self) -> bool:
        return self.terminal is not None

    @property
    def in_check(self) -> bool:
        return is_in_check(self.position.board, self.side_to_move)

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def last_move(self) -> Move | None:
        return self.move_history[-1].move if self.move_history else None

    def captured(self, color: Color) -> list[PieceType]:
        """Live list of piece types captured by *color*."""
        if color == Color.WHITE:
            return self.captured_by_white
        return self.captured_by_black

    def repetition_count(self) -> int:
        """How many times the current position has occurred."""
        return self.position_counts.get(self.position.key(), 0)

    def legal_moves(self, sq: Square) -> list[Move]:
        """Legal moves of the piece on *sq* for the side to move."""
        return MoveGenerator(self.position).legal_moves(sq)

    def all_legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return MoveGenerator(self.position).all_legal_moves()

    def snapshot(self) -> GameSnapshot:
        """Detached copy for presentation layers."""
        pos = self.position
        return GameSnapshot(
            board=pos.board.copy(),
            side_to_move=pos.side_to_move,
            castling=pos.castling,
            en_passant=pos.en_passant,
            in_check=self.in_check,
            captured_by_white=tuple(self.captured_by_white),
            captured_by_black=tuple(self.captured_by_black),
            terminal=self.terminal,
            ply_count=self.ply_count,
            last_move=self.last_move,
        )

    def _evaluate(self, repetition_count: int) -> Terminal | None:
        return Rules.evaluate(
            self.position,
            repetition_count,
            repetition_threshold=self.options.repetition_threshold,
            detect_insufficient_material=self.options.detect_insufficient_material,
        )
