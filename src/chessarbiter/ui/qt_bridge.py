"""Qt bridge exposing the select-then-move flow as slots and signals."""

from __future__ import annotations

import logging

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessarbiter.core.errors import IllegalMoveError
from chessarbiter.core.move import Move
from chessarbiter.core.rules import Terminal
from chessarbiter.core.types import Square, is_valid_square
from chessarbiter.game.controller import GameController
from chessarbiter.game.interfaces import GameSnapshot

_LOGGER = logging.getLogger(__name__)

NO_SELECTION = -1


class GameBridge(QObject):
    """GUI-thread adapter around a :class:`GameController`.

    Board widgets call :meth:`click_square`; they repaint from the
    signals only. Moves committed directly on the controller are
    forwarded as well, since the bridge listens to its events.
    """

    selection_changed = pyqtSignal(int, object)  # square or NO_SELECTION, moves
    move_applied = pyqtSignal(object, object)  # Move, GameSnapshot
    move_rejected = pyqtSignal(object)  # Move
    game_over = pyqtSignal(object)  # Terminal
    position_reset = pyqtSignal(object)  # GameSnapshot

    def __init__(
        self,
        controller: GameController | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller if controller is not None else GameController()
        self._selected: Square | None = None
        self._targets: list[Move] = []

        events = self._controller.events
        events.on_move.append(self._on_move)
        events.on_game_over.append(self._on_game_over)
        events.on_reset.append(self._on_reset)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def controller(self) -> GameController:
        return self._controller

    @property
    def selected_square(self) -> Square | None:
        return self._selected

    @property
    def legal_targets(self) -> list[Move]:
        return list(self._targets)

    # ── Slots ────────────────────────────────────────────────────────────

    @pyqtSlot(int)
    def select_square(self, sq: int) -> None:
        """Select the piece on *sq*, or clear the selection."""
        board = self._controller.state.position.board
        piece = board[sq] if is_valid_square(sq) else None
        if (
            piece is None
            or piece.color != self._controller.state.side_to_move
            or self._controller.state.is_game_over
        ):
            self._clear_selection()
            return
        self._selected = sq
        self._targets = self._controller.legal_moves(sq)
        self.selection_changed.emit(sq, list(self._targets))

    @pyqtSlot(int)
    def click_square(self, sq: int) -> None:
        """Move the selected piece to *sq* if legal, otherwise reselect."""
        if self._selected is not None:
            for move in self._targets:
                if move.to_sq == sq:
                    self.submit_move(move)
                    return
        self.select_square(sq)

    @pyqtSlot(object, result=bool)
    def submit_move(self, move: object) -> bool:
        """Commit *move*; emits ``move_rejected`` instead of raising."""
        if not isinstance(move, Move):
            _LOGGER.warning("Bridge received a non-move object: %r", move)
            self.move_rejected.emit(move)
            return False
        try:
            self._controller.apply_move(move)
        except IllegalMoveError as exc:
            _LOGGER.warning("Rejected move %s", exc)
            self.move_rejected.emit(move)
            return False
        return True

    @pyqtSlot()
    def reset(self) -> None:
        self._controller.reset()

    # ── Controller event handlers ────────────────────────────────────────

    def _on_move(self, move: Move, snapshot: GameSnapshot) -> None:
        self._clear_selection()
        self.move_applied.emit(move, snapshot)

    def _on_game_over(self, terminal: Terminal) -> None:
        self.game_over.emit(terminal)

    def _on_reset(self, snapshot: GameSnapshot) -> None:
        self._clear_selection()
        self.position_reset.emit(snapshot)

    def _clear_selection(self) -> None:
        had_selection = self._selected is not None
        self._selected = None
        self._targets = []
        if had_selection:
            self.selection_changed.emit(NO_SELECTION, [])
