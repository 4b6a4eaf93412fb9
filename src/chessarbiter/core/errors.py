"""Exception hierarchy for the rules engine."""

from __future__ import annotations


class ChessError(Exception):
    """Base class for every error raised by chessarbiter."""


class IllegalMoveError(ChessError, ValueError):
    """The move is not in the legal set of the current position."""

    def __init__(self, move: object, reason: str = "not a legal move") -> None:
        super().__init__(f"{move!r}: {reason}")
        self.move = move
        self.reason = reason


class GameOverError(IllegalMoveError):
    """A move was submitted after the game ended."""

    def __init__(self, move: object) -> None:
        super().__init__(move, "game is over")


class InconsistentStateError(ChessError, RuntimeError):
    """The board violates an invariant (e.g. a missing king).

    Only reachable by mutating a board behind the controller's back.
    """
