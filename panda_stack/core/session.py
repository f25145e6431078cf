"""
Session State
=============

Lives, score and round phase.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from panda_stack.core.config_loader import GameConfig, get_config


class Phase(Enum):
    PLAYING = "playing"
    GAME_OVER = "game_over"


class SessionState:
    """
    Tracks lives and score for the current round.

    When the last life is lost the round ends: the final score is kept in
    `final_score`, the phase becomes GAME_OVER and lives/score start over.
    The phase returns to PLAYING when the next round starts.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize session.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._starting_lives = config.session.starting_lives
        self._lives: int = self._starting_lives
        self._score: int = 0
        self._phase = Phase.PLAYING
        self._final_score: Optional[int] = None
        self._rounds_played: int = 0

    @property
    def lives(self) -> int:
        return self._lives

    @property
    def score(self) -> int:
        return self._score

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def is_game_over(self) -> bool:
        return self._phase is Phase.GAME_OVER

    @property
    def final_score(self) -> Optional[int]:
        """Score of the last finished round, or None if none has finished."""
        return self._final_score

    @property
    def rounds_played(self) -> int:
        return self._rounds_played

    def add_point(self) -> None:
        """Award one point for a successful landing."""
        self._score += 1

    def lose_life(self) -> bool:
        """
        Take one life away.

        Returns:
            True if no lives remain.
        """
        self._lives = max(0, self._lives - 1)
        return self._lives == 0

    def end_round(self) -> int:
        """
        Close the round and reinitialize lives and score.

        Returns:
            The final score of the round that ended.
        """
        final = self._score
        self._final_score = final
        self._rounds_played += 1
        self._lives = self._starting_lives
        self._score = 0
        self._phase = Phase.GAME_OVER
        return final

    def begin_round(self) -> None:
        self._phase = Phase.PLAYING

    def reset(self) -> None:
        """Full reset, forgetting finished rounds."""
        self._lives = self._starting_lives
        self._score = 0
        self._phase = Phase.PLAYING
        self._final_score = None
        self._rounds_played = 0
