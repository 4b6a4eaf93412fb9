"""Position — board plus side to move, castling rights and en-passant target."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from chessarbiter.core.board import Board
from chessarbiter.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessarbiter.core.legality import castling_rook_squares, en_passant_victim
from chessarbiter.core.move import Move
from chessarbiter.core.move_generator import MoveGenerator
from chessarbiter.core.piece import Piece
from chessarbiter.core.types import Square, make_square, rank_of


class PositionKey(NamedTuple):
    """Canonical identity of a position for repetition counting."""

    placement: tuple[str, ...]
    side_to_move: Color
    castling: CastlingRights
    en_passant: Square | None


@dataclass(frozen=True, slots=True)
class MoveEffect:
    """What :meth:`Position.make_move` did to the board."""

    piece: Piece
    captured: Piece | None
    promoted: bool


_BACK_RANK: tuple[int, int] = (7, 0)  # promotion rank per mover


class Position:
    """Full chess position: board + side to move + castling + en passant."""

    __slots__ = ("board", "side_to_move", "castling", "en_passant")

    # Original rook corners and the right each one guards.
    _ROOK_CORNERS: dict[Square, tuple[Color, CastlingRights]] = {
        make_square(0, 0): (Color.WHITE, CastlingRights.WHITE_QUEENSIDE),
        make_square(7, 0): (Color.WHITE, CastlingRights.WHITE_KINGSIDE),
        make_square(0, 7): (Color.BLACK, CastlingRights.BLACK_QUEENSIDE),
        make_square(7, 7): (Color.BLACK, CastlingRights.BLACK_KINGSIDE),
    }

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant

    # ── Move application ─────────────────────────────────────────────────

    def make_move(self, move: Move) -> MoveEffect:
        """Apply *move* in place and hand the turn to the opponent.

        No legality check happens here; callers pass generated moves.
        """
        board = self.board
        piece = board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {move.from_sq}")

        # Rights first: the destination still shows any captured rook.
        self._update_castling(move, piece)

        self.en_passant = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = (move.from_sq + move.to_sq) // 2

        captured: Piece | None
        if move.flag == MoveFlag.EN_PASSANT:
            victim_sq = en_passant_victim(move)
            captured = board[victim_sq]
            board[victim_sq] = None
        else:
            captured = board[move.to_sq]

        board[move.from_sq] = None
        board[move.to_sq] = piece

        if move.is_castling:
            rook_from, rook_to = castling_rook_squares(move)
            board[rook_to] = board[rook_from]
            board[rook_from] = None

        promoted = (
            piece.piece_type == PieceType.PAWN
            and rank_of(move.to_sq) == _BACK_RANK[int(piece.color)]
        )
        if promoted:
            board[move.to_sq] = Piece(piece.color, PieceType.QUEEN)

        self.side_to_move = self.side_to_move.opposite
        return MoveEffect(piece=piece, captured=captured, promoted=promoted)

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _update_castling(self, move: Move, piece: Piece) -> None:
        rights = self.castling
        if piece.piece_type == PieceType.KING:
            rights &= ~CastlingRights.both(piece.color)

        corner = self._ROOK_CORNERS.get(move.from_sq)
        if piece.piece_type == PieceType.ROOK and corner is not None:
            owner, right = corner
            if owner == piece.color:
                rights &= ~right

        corner = self._ROOK_CORNERS.get(move.to_sq)
        captured = self.board[move.to_sq]
        if corner is not None and captured is not None:
            owner, right = corner
            if captured == Piece(owner, PieceType.ROOK):
                rights &= ~right

        self.castling = rights

    # ── Utilities ────────────────────────────────────────────────────────

    def key(self) -> PositionKey:
        """Repetition key; the en-passant square only counts if capturable."""
        return PositionKey(
            placement=self.board.placement(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant if self.en_passant_capturable() else None,
        )

    def en_passant_capturable(self) -> bool:
        """Can the side to move legally capture en passant right now?"""
        if self.en_passant is None:
            return False
        gen = MoveGenerator(self)
        for sq in self.board.pieces(self.side_to_move, PieceType.PAWN):
            if any(m.is_en_passant for m in gen.legal_moves(sq)):
                return True
        return False

    def copy(self) -> Position:
        """Independent copy; the board is cloned."""
        return Position(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
        )

    @classmethod
    def initial(cls) -> Position:
        return cls()

    def __repr__(self) -> str:
        return (
            f"Position(side_to_move={self.side_to_move!s}, "
            f"castling={self.castling!r}, en_passant={self.en_passant!r})\n"
            f"{self.board!r}"
        )
