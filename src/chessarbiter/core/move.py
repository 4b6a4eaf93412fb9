"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessarbiter.core.enums import MoveFlag
from chessarbiter.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single candidate move.

    Promotion is not encoded: a pawn landing on the back rank always
    becomes a queen when the move is applied.
    """

    from_sq: Square
    to_sq: Square
    is_capture: bool = False
    flag: MoveFlag = MoveFlag.NORMAL

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    @property
    def is_castling(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT
