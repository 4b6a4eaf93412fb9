"""Per-square pseudo-legal and legal move generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessarbiter.core.attacks import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    QUEEN_RAYS,
    ROOK_RAYS,
    is_in_check,
    is_square_attacked,
    pawn_direction,
)
from chessarbiter.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessarbiter.core.legality import filter_legal
from chessarbiter.core.move import Move
from chessarbiter.core.piece import Piece
from chessarbiter.core.types import Square, file_of, in_bounds, make_square, rank_of

if TYPE_CHECKING:
    from chessarbiter.core.position import Position


_PAWN_START_RANK: tuple[int, int] = (1, 6)
_HOME_RANK: tuple[int, int] = (0, 7)
_KING_FILE = 4


class MoveGenerator:
    """Generates moves for pieces of a given :class:`Position`.

    Never mutates the position: legality is checked on board clones.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def legal_moves(self, sq: Square, consider_check: bool = True) -> list[Move]:
        """Moves for the piece on *sq* if it belongs to the side to move.

        Empty squares and opponent pieces yield an empty list.
        """
        piece = self._board[sq]
        if piece is None or piece.color != self._pos.side_to_move:
            return []
        moves = self.pseudo_legal_moves(sq)
        if not consider_check:
            return moves
        return filter_legal(self._board, moves)

    def pseudo_legal_moves(self, sq: Square) -> list[Move]:
        """Pattern moves of the piece on *sq* (may leave own king in check)."""
        piece = self._board[sq]
        if piece is None:
            return []

        moves: list[Move] = []
        ptype = piece.piece_type
        if ptype == PieceType.PAWN:
            self._gen_pawn(sq, piece.color, moves)
        elif ptype == PieceType.KNIGHT:
            self._gen_steps(sq, piece.color, KNIGHT_TARGETS[sq], moves)
        elif ptype == PieceType.BISHOP:
            self._gen_sliding(sq, piece.color, BISHOP_RAYS[sq], moves)
        elif ptype == PieceType.ROOK:
            self._gen_sliding(sq, piece.color, ROOK_RAYS[sq], moves)
        elif ptype == PieceType.QUEEN:
            self._gen_sliding(sq, piece.color, QUEEN_RAYS[sq], moves)
        else:
            self._gen_steps(sq, piece.color, KING_TARGETS[sq], moves)
            self._gen_castling(sq, piece.color, moves)
        return moves

    def all_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        moves: list[Move] = []
        for sq in self._board.occupied(self._pos.side_to_move):
            moves.extend(self.legal_moves(sq))
        return moves

    def has_legal_move(self) -> bool:
        """Whether the side to move has at least one legal move."""
        return any(
            self.legal_moves(sq) for sq in self._board.occupied(self._pos.side_to_move)
        )

    def is_in_check(self, color: Color) -> bool:
        return is_in_check(self._board, color)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        file_idx = file_of(sq)
        rank_idx = rank_of(sq)
        step = pawn_direction(color)
        next_rank = rank_idx + step
        if not in_bounds(file_idx, next_rank):
            return

        one_step = make_square(file_idx, next_rank)
        if board.is_empty(one_step):
            moves.append(Move(sq, one_step))
            if rank_idx == _PAWN_START_RANK[int(color)]:
                two_step = make_square(file_idx, next_rank + step)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, flag=MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not in_bounds(file_idx + df, next_rank):
                continue
            cap_sq = make_square(file_idx + df, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    moves.append(Move(sq, cap_sq, is_capture=True))
            elif cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, is_capture=True, flag=MoveFlag.EN_PASSANT))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq))
            elif target.color != color:
                moves.append(Move(sq, to_sq, is_capture=True))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq, is_capture=True))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        home = _HOME_RANK[int(color)]
        if king_sq != make_square(_KING_FILE, home):
            return

        rights = self._pos.castling
        if not rights & CastlingRights.both(color):
            return
        if is_in_check(self._board, color):
            return

        rook = Piece(color, PieceType.ROOK)
        if rights & CastlingRights.kingside(color):
            if self._can_castle(home, rook, between=(5, 6), transit=(5, 6), corner=7):
                moves.append(
                    Move(king_sq, make_square(6, home), flag=MoveFlag.CASTLE_KINGSIDE)
                )
        if rights & CastlingRights.queenside(color):
            if self._can_castle(home, rook, between=(1, 2, 3), transit=(3, 2), corner=0):
                moves.append(
                    Move(king_sq, make_square(2, home), flag=MoveFlag.CASTLE_QUEENSIDE)
                )

    def _can_castle(
        self,
        home: int,
        rook: Piece,
        *,
        between: tuple[int, ...],
        transit: tuple[int, ...],
        corner: int,
    ) -> bool:
        board = self._board
        if board[make_square(corner, home)] != rook:
            return False
        if any(not board.is_empty(make_square(f, home)) for f in between):
            return False
        opponent = rook.color.opposite
        return not any(
            is_square_attacked(board, make_square(f, home), opponent) for f in transit
        )
