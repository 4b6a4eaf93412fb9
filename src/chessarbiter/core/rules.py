"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessarbiter.core.attacks import is_in_check
from chessarbiter.core.enums import Color, PieceType, TerminalReason
from chessarbiter.core.move_generator import MoveGenerator
from chessarbiter.core.types import square_color

if TYPE_CHECKING:
    from chessarbiter.core.position import Position


DEFAULT_REPETITION_THRESHOLD = 3

_HEAVY_OR_PAWN = (PieceType.PAWN, PieceType.ROOK, PieceType.QUEEN)


@dataclass(frozen=True, slots=True)
class Terminal:
    """How a game ended. ``winner`` is set only for checkmate."""

    reason: TerminalReason
    winner: Color | None = None

    def __str__(self) -> str:
        if not self.reason.is_draw:
            return f"{self.reason.name.lower()}, {self.winner} wins"
        return f"draw by {self.reason.name.lower().replace('_', ' ')}"


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return is_in_check(position.board, position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_move()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return not MoveGenerator(position).has_legal_move()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """Simplified dead-position test over both sides' pieces combined.

        Drawn: bare kings, a single knight, a single bishop, or exactly two
        bishops standing on same-coloured squares. Everything else (two
        knights, knight + bishop, opposite-coloured bishops) plays on.
        """
        knights = 0
        bishop_colors: list[int] = []
        for sq, piece in position.board.items():
            if piece.piece_type in _HEAVY_OR_PAWN:
                return False
            if piece.piece_type == PieceType.KNIGHT:
                knights += 1
            elif piece.piece_type == PieceType.BISHOP:
                bishop_colors.append(square_color(sq))

        if not bishop_colors:
            return knights <= 1
        if knights:
            return False
        if len(bishop_colors) == 1:
            return True
        if len(bishop_colors) == 2:
            return bishop_colors[0] == bishop_colors[1]
        return False

    @staticmethod
    def is_repetition(
        count: int, threshold: int = DEFAULT_REPETITION_THRESHOLD
    ) -> bool:
        # Exact match: fires once, on the move that reaches the threshold.
        return count == threshold

    @staticmethod
    def evaluate(
        position: Position,
        repetition_count: int,
        *,
        repetition_threshold: int = DEFAULT_REPETITION_THRESHOLD,
        detect_insufficient_material: bool = True,
    ) -> Terminal | None:
        """Terminal status for the side to move, or ``None`` if play goes on."""
        if not MoveGenerator(position).has_legal_move():
            if Rules.is_in_check(position):
                return Terminal(TerminalReason.CHECKMATE, position.side_to_move.opposite)
            return Terminal(TerminalReason.STALEMATE)

        if Rules.is_repetition(repetition_count, repetition_threshold):
            return Terminal(TerminalReason.REPETITION)

        if detect_insufficient_material and Rules.is_insufficient_material(position):
            return Terminal(TerminalReason.INSUFFICIENT_MATERIAL)

        return None
