"""Tests for GameController — the command/query surface."""

import logging

import pytest

from chessarbiter.core.board import Board
from chessarbiter.core.enums import CastlingRights, Color, MoveFlag, PieceType, TerminalReason
from chessarbiter.core.errors import (
    GameOverError,
    IllegalMoveError,
    InconsistentStateError,
)
from chessarbiter.core.move import Move
from chessarbiter.core.piece import Piece
from chessarbiter.core.rules import Terminal
from chessarbiter.core.types import D5, D6, E2, E4, E5, E7, parse_square
from chessarbiter.game.controller import GameController
from chessarbiter.game.interfaces import GamePhase
from chessarbiter.game.options import GameOptions

FOOLS_MATE = ("f2f3", "e7e5", "g2g4", "d8h4")
KNIGHT_SHUFFLE = ("g1f3", "g8f6", "f3g1", "f6g8")


class TestQueries:
    def test_twenty_opening_moves(self, ctrl) -> None:
        total = sum(len(ctrl.legal_moves(sq)) for sq in range(64))
        assert total == 20

    def test_empty_and_opponent_squares(self, ctrl) -> None:
        assert ctrl.legal_moves(parse_square("e4")) == []
        assert ctrl.legal_moves(E7) == []

    def test_move_for(self, ctrl) -> None:
        move = ctrl.move_for(E2, E4)
        assert move == Move(E2, E4, flag=MoveFlag.DOUBLE_PAWN)
        assert ctrl.move_for(E2, E5) is None

    def test_initial_status(self, ctrl) -> None:
        status = ctrl.status()
        assert status.turn == Color.WHITE
        assert not status.in_check
        assert not status.game_over
        assert status.terminal_reason is None and status.winner is None

    def test_check_reported(self, ctrl, play) -> None:
        play(ctrl, "e2e4", "f7f6", "d1h5")
        status = ctrl.status()
        assert status.turn == Color.BLACK
        assert status.in_check
        assert not status.game_over

    def test_captured_is_a_copy(self, ctrl, play) -> None:
        play(ctrl, "e2e4", "d7d5", "e4d5")
        taken = ctrl.captured(Color.WHITE)
        assert taken == [PieceType.PAWN]
        taken.append(PieceType.QUEEN)
        assert ctrl.captured(Color.WHITE) == [PieceType.PAWN]
        assert ctrl.captured(Color.BLACK) == []

    def test_material_advantage(self, ctrl, play) -> None:
        assert ctrl.material_advantage() == {Color.WHITE: 0, Color.BLACK: 0}
        # 1.e4 d5 2.exd5 Qxd5 3.Nc3 Qxa2 4.Rxa2
        play(ctrl, "e2e4", "d7d5", "e4d5", "d8d5", "b1c3", "d5a2", "a1a2")
        assert ctrl.captured(Color.WHITE) == [PieceType.PAWN, PieceType.QUEEN]
        assert ctrl.captured(Color.BLACK) == [PieceType.PAWN, PieceType.PAWN]
        assert ctrl.material_advantage() == {Color.WHITE: 8, Color.BLACK: 0}


class TestApplyMove:
    def test_turn_alternates(self, ctrl) -> None:
        snapshot = ctrl.apply_move(ctrl.move_for(E2, E4))
        assert snapshot.side_to_move == Color.BLACK
        assert snapshot.phase == GamePhase.BLACK_TO_MOVE
        assert snapshot.ply_count == 1
        assert snapshot.en_passant == parse_square("e3")
        assert snapshot.board[E4] == Piece(Color.WHITE, PieceType.PAWN)

    def test_illegal_move_leaves_state_unchanged(self, ctrl) -> None:
        before = ctrl.snapshot()
        with pytest.raises(IllegalMoveError):
            ctrl.apply_move(Move(E2, E5))
        after = ctrl.snapshot()
        assert after.board == before.board
        assert after.side_to_move == Color.WHITE
        assert after.ply_count == 0

    def test_illegal_move_is_value_error(self, ctrl) -> None:
        with pytest.raises(ValueError):
            ctrl.apply_move(Move(E7, parse_square("e5")))

    def test_flag_must_match(self, ctrl) -> None:
        with pytest.raises(IllegalMoveError):
            ctrl.apply_move(Move(E2, E4))

    def test_out_of_range_square(self, ctrl) -> None:
        with pytest.raises(IllegalMoveError, match="out of range"):
            ctrl.apply_move(Move(E2, 64))

    def test_submit_move_reports_rejection(self, ctrl, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="chessarbiter.game.controller"):
            assert not ctrl.submit_move(Move(E2, E5))
        assert "Rejected move" in caplog.text
        assert ctrl.submit_move(ctrl.move_for(E2, E4))
        assert ctrl.state.side_to_move == Color.BLACK

    def test_snapshot_is_detached(self, ctrl) -> None:
        snapshot = ctrl.snapshot()
        snapshot.board[E2] = None
        assert ctrl.state.position.board[E2] is not None

    def test_castling(self, ctrl, play) -> None:
        play(ctrl, "e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6")
        move = ctrl.move_for(parse_square("e1"), parse_square("g1"))
        assert move is not None and move.flag == MoveFlag.CASTLE_KINGSIDE
        snapshot = ctrl.apply_move(move)
        assert snapshot.board[parse_square("g1")] == Piece(Color.WHITE, PieceType.KING)
        assert snapshot.board[parse_square("f1")] == Piece(Color.WHITE, PieceType.ROOK)
        assert snapshot.castling == CastlingRights.BLACK_BOTH

    def test_rook_returning_home_does_not_restore_right(self, make_game, play) -> None:
        game = make_game({"e1": "K", "h1": "R", "e8": "k"})
        assert game.move_for(parse_square("e1"), parse_square("g1")) is not None
        play(game, "h1h2", "e8d8", "h2h1", "d8e8")
        assert game.move_for(parse_square("e1"), parse_square("g1")) is None
        assert game.state.position.castling == CastlingRights.NONE

    def test_en_passant_capture(self, ctrl, play) -> None:
        play(ctrl, "e2e4", "a7a6", "e4e5", "d7d5")
        move = ctrl.move_for(E5, D6)
        assert move is not None and move.is_en_passant
        snapshot = ctrl.apply_move(move)
        assert snapshot.board[D5] is None
        assert snapshot.captured_by_white == (PieceType.PAWN,)

    def test_en_passant_expires_after_one_ply(self, ctrl, play) -> None:
        play(ctrl, "e2e4", "a7a6", "e4e5", "d7d5", "a2a3", "h7h6")
        assert ctrl.move_for(E5, D6) is None

    def test_promotion(self, make_game) -> None:
        game = make_game({"e1": "K", "h6": "k", "b7": "P"})
        snapshot = game.apply_move(game.move_for(parse_square("b7"), parse_square("b8")))
        assert snapshot.board[parse_square("b8")] == Piece(Color.WHITE, PieceType.QUEEN)
        assert game.state.move_history[-1].promoted


class TestGameOver:
    def test_fools_mate(self, ctrl, play) -> None:
        play(ctrl, *FOOLS_MATE)
        status = ctrl.status()
        assert status.game_over
        assert status.in_check
        assert status.terminal_reason == TerminalReason.CHECKMATE
        assert status.winner == Color.BLACK
        assert ctrl.state.phase == GamePhase.GAME_OVER

    def test_no_moves_after_game_over(self, ctrl, play) -> None:
        play(ctrl, *FOOLS_MATE)
        assert ctrl.legal_moves(parse_square("a2")) == []
        with pytest.raises(GameOverError):
            ctrl.apply_move(Move(parse_square("a2"), parse_square("a3")))
        assert not ctrl.submit_move(Move(parse_square("a2"), parse_square("a3")))

    def test_stalemate(self, make_game, play) -> None:
        game = make_game({"a1": "K", "c2": "k", "b4": "q"}, Color.BLACK)
        play(game, "b4b3")
        status = game.status()
        assert status.game_over
        assert status.terminal_reason == TerminalReason.STALEMATE
        assert status.winner is None
        assert not status.in_check

    def test_stalemate_from_start(self, make_game) -> None:
        game = make_game({"a1": "K", "c2": "k", "b3": "q"})
        status = game.status()
        assert status.game_over
        assert status.terminal_reason == TerminalReason.STALEMATE
        assert status.winner is None
        assert game.state.phase == GamePhase.GAME_OVER

    def test_checkmate_from_start(self, make_game) -> None:
        game = make_game(
            {"g1": "K", "f2": "P", "g2": "P", "h2": "P", "a1": "r", "a8": "k"}
        )
        status = game.status()
        assert status.terminal_reason == TerminalReason.CHECKMATE
        assert status.winner == Color.BLACK
        with pytest.raises(GameOverError):
            game.apply_move(Move(parse_square("h2"), parse_square("h3")))

    def test_bare_kings_from_start(self, make_game) -> None:
        game = make_game({"e1": "K", "e8": "k"})
        assert game.status().terminal_reason == TerminalReason.INSUFFICIENT_MATERIAL

    def test_insufficient_material_after_capture(self, make_game, play) -> None:
        game = make_game({"e1": "K", "f3": "N", "h8": "k", "d2": "r"})
        play(game, "f3d2")
        assert game.status().terminal_reason == TerminalReason.INSUFFICIENT_MATERIAL
        assert game.captured(Color.WHITE) == [PieceType.ROOK]

    def test_insufficient_material_can_be_disabled(self, make_game, play) -> None:
        game = make_game(
            {"e1": "K", "f3": "N", "h8": "k", "d2": "r"},
            options=GameOptions(detect_insufficient_material=False),
        )
        play(game, "f3d2")
        assert not game.status().game_over

    def test_threefold_repetition(self, ctrl, play) -> None:
        play(ctrl, *KNIGHT_SHUFFLE, *KNIGHT_SHUFFLE[:3])
        assert not ctrl.status().game_over
        play(ctrl, KNIGHT_SHUFFLE[3])
        status = ctrl.status()
        assert status.game_over
        assert status.terminal_reason == TerminalReason.REPETITION
        assert status.winner is None
        assert ctrl.state.repetition_count() == 3

    def test_custom_repetition_threshold(self, play) -> None:
        game = GameController(GameOptions(repetition_threshold=2))
        play(game, *KNIGHT_SHUFFLE)
        assert game.status().terminal_reason == TerminalReason.REPETITION

    def test_game_over_logged(self, ctrl, play, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="chessarbiter.game.state"):
            play(ctrl, *FOOLS_MATE)
        assert "checkmate, black wins" in caplog.text


class TestEvents:
    def test_move_event(self, ctrl) -> None:
        seen: list[tuple[Move, int]] = []
        ctrl.events.on_move.append(lambda m, snap: seen.append((m, snap.ply_count)))
        move = ctrl.move_for(E2, E4)
        ctrl.apply_move(move)
        assert seen == [(move, 1)]

    def test_rejected_move_fires_nothing(self, ctrl) -> None:
        seen: list[object] = []
        ctrl.events.on_move.append(lambda m, snap: seen.append(m))
        ctrl.submit_move(Move(E2, E5))
        assert seen == []

    def test_game_over_event(self, ctrl, play) -> None:
        results: list[Terminal] = []
        ctrl.events.on_game_over.append(results.append)
        play(ctrl, *FOOLS_MATE)
        assert results == [Terminal(TerminalReason.CHECKMATE, Color.BLACK)]

    def test_reset_event(self, ctrl, play) -> None:
        snapshots = []
        ctrl.events.on_reset.append(snapshots.append)
        play(ctrl, "e2e4")
        ctrl.reset()
        assert len(snapshots) == 1
        assert snapshots[0].ply_count == 0


class TestReset:
    def test_reset_restores_initial_position(self, ctrl, play) -> None:
        play(ctrl, *FOOLS_MATE)
        snapshot = ctrl.reset()
        assert snapshot.board == Board.initial()
        assert snapshot.side_to_move == Color.WHITE
        assert snapshot.castling == CastlingRights.ALL
        assert not snapshot.is_game_over
        assert ctrl.captured(Color.WHITE) == []
        assert ctrl.state.repetition_count() == 1

    def test_reset_keeps_options(self) -> None:
        options = GameOptions(repetition_threshold=4)
        game = GameController(options)
        game.reset()
        assert game.options is options
        assert game.state.options is options

    def test_reset_from_custom_position(self, make_game) -> None:
        game = make_game({"e1": "K", "e8": "k", "a2": "P"})
        game.reset()
        assert game.snapshot().board == Board.initial()


class TestFromBoard:
    def test_castling_inferred_from_placement(self, make_game) -> None:
        game = make_game({"e1": "K", "h1": "R", "a1": "N", "e8": "k", "a8": "r"})
        assert game.state.position.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE
        )
        assert game.move_for(parse_square("e1"), parse_square("g1")) is not None

    def test_explicit_castling_rights(self, make_game) -> None:
        game = make_game(
            {"e1": "K", "h1": "R", "e8": "k"}, castling=CastlingRights.NONE
        )
        assert game.move_for(parse_square("e1"), parse_square("g1")) is None

    def test_side_to_move(self, make_game) -> None:
        game = make_game({"e1": "K", "e8": "k"}, Color.BLACK)
        assert game.status().turn == Color.BLACK

    def test_board_is_copied(self) -> None:
        board = Board.from_pieces({"e1": "K", "e8": "k"})
        game = GameController.from_board(board)
        board[parse_square("e1")] = None
        assert game.state.position.board[parse_square("e1")] is not None

    @pytest.mark.parametrize(
        "placement",
        [{"e1": "K"}, {"e8": "k"}, {"e1": "K", "d1": "K", "e8": "k"}],
        ids=["no-black-king", "no-white-king", "two-white-kings"],
    )
    def test_king_count_enforced(self, placement: dict[str, str]) -> None:
        with pytest.raises(InconsistentStateError):
            GameController.from_board(Board.from_pieces(placement))
