"""GameController — the single owner of a game's mutable state.

Validates commands, applies them to :class:`GameState`, and notifies
listeners via simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from chessarbiter.core.board import Board
from chessarbiter.core.enums import CastlingRights, Color, PieceType
from chessarbiter.core.errors import GameOverError, IllegalMoveError
from chessarbiter.core.move import Move
from chessarbiter.core.piece import PIECE_VALUES, Piece
from chessarbiter.core.position import Position
from chessarbiter.core.rules import Terminal
from chessarbiter.core.types import Square, is_valid_square, make_square
from chessarbiter.game.interfaces import GameSnapshot, GameStatus, IGameController
from chessarbiter.game.options import GameOptions
from chessarbiter.game.state import GameState

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[Move, GameSnapshot], None]
GameOverCallback = Callable[[Terminal], None]
ResetCallback = Callable[[GameSnapshot], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_reset: list[ResetCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class GameController(IGameController):
    """Arbitrates one game: lists legal moves, commits them, reports status.

    Thread-safety: none. Callers serialise query-then-command on a single
    thread (the main/UI thread).
    """

    __slots__ = ("_state", "_options", "events")

    def __init__(self, options: GameOptions | None = None) -> None:
        self._options = options if options is not None else GameOptions()
        self._state = GameState(options=self._options)
        self.events = GameEvents()

    @classmethod
    def from_board(
        cls,
        board: Board,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights | None = None,
        en_passant: Square | None = None,
        options: GameOptions | None = None,
    ) -> GameController:
        """Start from an arbitrary position instead of the initial one.

        When *castling* is omitted, a right is granted wherever the king and
        the matching rook stand on their original squares.

        Raises:
            InconsistentStateError: a side does not have exactly one king.
        """
        for color in Color:
            board.king_square(color)
        if castling is None:
            castling = _castling_from_placement(board)
        ctrl = cls(options)
        position = Position(board.copy(), side_to_move, castling, en_passant)
        ctrl._state = GameState(position=position, options=ctrl._options)
        return ctrl

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def options(self) -> GameOptions:
        return self._options

    # ── Queries ──────────────────────────────────────────────────────────

    def legal_moves(self, sq: Square) -> list[Move]:
        if self._state.is_game_over:
            return []
        return self._state.legal_moves(sq)

    def move_for(self, from_sq: Square, to_sq: Square) -> Move | None:
        """The legal move from *from_sq* landing on *to_sq*, if any."""
        for move in self.legal_moves(from_sq):
            if move.to_sq == to_sq:
                return move
        return None

    def status(self) -> GameStatus:
        terminal = self._state.terminal
        return GameStatus(
            turn=self._state.side_to_move,
            in_check=self._state.in_check,
            game_over=terminal is not None,
            terminal_reason=terminal.reason if terminal is not None else None,
            winner=terminal.winner if terminal is not None else None,
        )

    def captured(self, color: Color) -> list[PieceType]:
        return list(self._state.captured(color))

    def material_advantage(self) -> dict[Color, int]:
        """Each side's lead in captured material (0 for the side behind)."""
        white = sum(PIECE_VALUES[pt] for pt in self._state.captured_by_white)
        black = sum(PIECE_VALUES[pt] for pt in self._state.captured_by_black)
        return {
            Color.WHITE: max(0, white - black),
            Color.BLACK: max(0, black - white),
        }

    def snapshot(self) -> GameSnapshot:
        return self._state.snapshot()

    # ── Commands ─────────────────────────────────────────────────────────

    def apply_move(self, move: Move) -> GameSnapshot:
        self._validate(move)

        self._state.apply_move(move)
        _LOGGER.debug("Applied %s, %s to move", move, self._state.side_to_move)
        snapshot = self._state.snapshot()

        self._emit_move(move, snapshot)
        if self._state.terminal is not None:
            self._emit_game_over(self._state.terminal)
        return snapshot

    def submit_move(self, move: Move) -> bool:
        """Like :meth:`apply_move` but reports rejection as ``False``."""
        try:
            self.apply_move(move)
        except IllegalMoveError as exc:
            _LOGGER.warning("Rejected move %s", exc)
            return False
        return True

    def reset(self) -> GameSnapshot:
        self._state = GameState(options=self._options)
        _LOGGER.debug("Game reset to the initial position")
        snapshot = self._state.snapshot()
        for cb in self.events.on_reset:
            cb(snapshot)
        return snapshot

    # ── Internal helpers ─────────────────────────────────────────────────

    def _validate(self, move: Move) -> None:
        if self._state.is_game_over:
            raise GameOverError(move)
        if not (is_valid_square(move.from_sq) and is_valid_square(move.to_sq)):
            raise IllegalMoveError(move, "square out of range")
        if move not in self._state.legal_moves(move.from_sq):
            raise IllegalMoveError(move)

    def _emit_move(self, move: Move, snapshot: GameSnapshot) -> None:
        for cb in self.events.on_move:
            cb(move, snapshot)

    def _emit_game_over(self, terminal: Terminal) -> None:
        for cb in self.events.on_game_over:
            cb(terminal)


def _castling_from_placement(board: Board) -> CastlingRights:
    rights = CastlingRights.NONE
    for color, home in ((Color.WHITE, 0), (Color.BLACK, 7)):
        if board[make_square(4, home)] != Piece(color, PieceType.KING):
            continue
        rook = Piece(color, PieceType.ROOK)
        if board[make_square(7, home)] == rook:
            rights |= CastlingRights.kingside(color)
        if board[make_square(0, home)] == rook:
            rights |= CastlingRights.queenside(color)
    return rights
