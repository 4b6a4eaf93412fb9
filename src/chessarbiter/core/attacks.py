"""Attack detection over a bare :class:`Board`.

Works on any board, including throwaway clones used for legality checks,
so it takes no position metadata.
"""

from __future__ import annotations

from chessarbiter.core.board import Board
from chessarbiter.core.enums import Color, PieceType
from chessarbiter.core.types import Square, in_bounds, make_square

KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


def pawn_direction(color: Color) -> int:
    """Rank delta of a forward pawn step for *color*."""
    return 1 if color == Color.WHITE else -1


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if in_bounds(af, ar):
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while in_bounds(af, ar):
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


def _build_pawn_sources(color: Color) -> tuple[tuple[Square, ...], ...]:
    # Squares from which a pawn of *color* attacks each square.
    back = -pawn_direction(color)
    return _build_targets(((-1, back), (1, back)))


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)
BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)
QUEEN_RAYS = _build_rays(QUEEN_DIRS)
_PAWN_SOURCES = (
    _build_pawn_sources(Color.WHITE),
    _build_pawn_sources(Color.BLACK),
)


# -- Public API -------------------------------------------------------------


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?"""
    if _any_of(board, _PAWN_SOURCES[int(by_color)][sq], by_color, PieceType.PAWN):
        return True
    if _any_of(board, KNIGHT_TARGETS[sq], by_color, PieceType.KNIGHT):
        return True
    if _any_of(board, KING_TARGETS[sq], by_color, PieceType.KING):
        return True
    if _ray_attacked(board, BISHOP_RAYS[sq], by_color, _DIAGONAL_ATTACKERS):
        return True
    return _ray_attacked(board, ROOK_RAYS[sq], by_color, _ORTHOGONAL_ATTACKERS)


def is_in_check(board: Board, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?

    Raises:
        InconsistentStateError: *color* does not have exactly one king.
    """
    return is_square_attacked(board, board.king_square(color), color.opposite)


# -- Helpers ----------------------------------------------------------------


def _any_of(
    board: Board,
    squares: tuple[Square, ...],
    color: Color,
    piece_type: PieceType,
) -> bool:
    for from_sq in squares:
        piece = board[from_sq]
        if piece is not None and piece.color == color and piece.piece_type == piece_type:
            return True
    return False


def _ray_attacked(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    attacker_types: tuple[PieceType, ...],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in attacker_types:
                return True
            break
    return False
