"""Rule switches for a game."""

from __future__ import annotations

from dataclasses import dataclass

from chessarbiter.core.rules import DEFAULT_REPETITION_THRESHOLD


@dataclass
class GameOptions:
    """All configurable rule settings."""

    # Occurrences of one position that end the game (exact match).
    repetition_threshold: int = DEFAULT_REPETITION_THRESHOLD

    # Automatic draw when neither side can force mate (simplified rule).
    detect_insufficient_material: bool = True

    def __post_init__(self) -> None:
        if self.repetition_threshold < 2:
            raise ValueError(
                f"repetition_threshold must be at least 2, got {self.repetition_threshold}"
            )
