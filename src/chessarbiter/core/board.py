"""Board - piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from chessarbiter.core.enums import Color, PieceType
from chessarbiter.core.errors import InconsistentStateError
from chessarbiter.core.piece import Piece
from chessarbiter.core.types import Square, is_valid_square, make_square, parse_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _check_square(sq: Square) -> None:
    if not is_valid_square(sq):
        raise IndexError(f"Square out of range: {sq}")


class Board:
    """Mutable 64-square board. Holds placement only, no game metadata."""

    __slots__ = ("_squares",)

    def __init__(self) -> None:
        self._squares: list[Piece | None] = [None] * 64

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        _check_square(sq)
        return self._squares[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        _check_square(sq)
        self._squares[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self[sq] is None

    def items(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares in a1..h8 order."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    # -- Query helpers ------------------------------------------------------

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares occupied by *color*'s *piece_type*."""
        target = Piece(color, piece_type)
        return [sq for sq, piece in self.items() if piece == target]

    def occupied(self, color: Color) -> list[Square]:
        """All squares occupied by *color*."""
        return [sq for sq, piece in self.items() if piece.color == color]

    def king_square(self, color: Color) -> Square:
        """Return the single king square for *color*."""
        kings = self.pieces(color, PieceType.KING)
        if len(kings) != 1:
            raise InconsistentStateError(
                f"Expected one {color.name} king on board, found {len(kings)}"
            )
        return kings[0]

    def placement(self) -> tuple[str, ...]:
        """Letter code per square ('' when empty); stable and hashable."""
        return tuple(str(p) if p is not None else "" for p in self._squares)

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Board:
        b = Board()
        b._squares = self._squares.copy()
        return b

    # -- Factory ------------------------------------------------------------

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        for f in range(8):
            b[make_square(f, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            b[make_square(f, 6)] = Piece(Color.BLACK, PieceType.PAWN)
        for f, pt in enumerate(_BACK_RANK):
            b[make_square(f, 0)] = Piece(Color.WHITE, pt)
            b[make_square(f, 7)] = Piece(Color.BLACK, pt)
        return b

    @classmethod
    def from_pieces(cls, placement: Mapping[str, str | Piece]) -> Board:
        """Build a board from ``{"e1": "K", "e8": "k", ...}``.

        Values are letter codes (uppercase white) or :class:`Piece` objects.
        """
        b = cls()
        for name, value in placement.items():
            piece = value if isinstance(value, Piece) else Piece.from_char(value)
            b[parse_square(name)] = piece
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(7, -1, -1):
            row = []
            for file in range(8):
                p = self[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
