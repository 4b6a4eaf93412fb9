"""Tests for GameOptions validation."""

import pytest

from chessarbiter.core.rules import DEFAULT_REPETITION_THRESHOLD
from chessarbiter.game.controller import GameController
from chessarbiter.game.options import GameOptions


class TestGameOptions:
    def test_defaults(self) -> None:
        options = GameOptions()
        assert options.repetition_threshold == DEFAULT_REPETITION_THRESHOLD == 3
        assert options.detect_insufficient_material

    @pytest.mark.parametrize("threshold", [0, 1, -3])
    def test_threshold_too_small(self, threshold: int) -> None:
        with pytest.raises(ValueError, match="repetition_threshold"):
            GameOptions(repetition_threshold=threshold)

    def test_controller_uses_defaults(self) -> None:
        assert GameController().options == GameOptions()
