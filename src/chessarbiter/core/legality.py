"""King-safety filtering by clone-and-discard simulation."""

from __future__ import annotations

from collections.abc import Iterable

from chessarbiter.core.attacks import is_in_check
from chessarbiter.core.board import Board
from chessarbiter.core.enums import MoveFlag
from chessarbiter.core.move import Move
from chessarbiter.core.types import Square, file_of, make_square, rank_of


def en_passant_victim(move: Move) -> Square:
    """Square of the pawn removed by an en-passant *move*.

    It sits on the destination file, on the rank the capturer started from.
    """
    return make_square(file_of(move.to_sq), rank_of(move.from_sq))


def castling_rook_squares(move: Move) -> tuple[Square, Square]:
    """(origin, destination) of the rook for a castling *move*."""
    rank = rank_of(move.from_sq)
    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        return make_square(7, rank), make_square(5, rank)
    if move.flag == MoveFlag.CASTLE_QUEENSIDE:
        return make_square(0, rank), make_square(3, rank)
    raise ValueError(f"{move} is not a castling move")


def simulate(board: Board, move: Move) -> Board:
    """Return a copy of *board* with the placement effect of *move* applied.

    Castling rights, en-passant targets and promotion are not modelled;
    none of them can change whether the mover's own king is attacked.
    """
    clone = board.copy()
    piece = clone[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")

    clone[move.from_sq] = None
    clone[move.to_sq] = piece

    if move.flag == MoveFlag.EN_PASSANT:
        clone[en_passant_victim(move)] = None
    elif move.is_castling:
        rook_from, rook_to = castling_rook_squares(move)
        clone[rook_to] = clone[rook_from]
        clone[rook_from] = None
    return clone


def leaves_king_in_check(board: Board, move: Move) -> bool:
    """Would playing *move* leave the mover's king attacked?"""
    piece = board[move.from_sq]
    if piece is None:
        raise ValueError(f"No piece on {move.from_sq}")
    return is_in_check(simulate(board, move), piece.color)


def filter_legal(board: Board, moves: Iterable[Move]) -> list[Move]:
    """Keep the candidates that do not expose the mover's king."""
    return [move for move in moves if not leaves_king_in_check(board, move)]
