"""
Core Game
=========

Main game orchestrator combining the falling panda, stack, landing rules,
camera and session state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np

from panda_stack.core.camera import Camera
from panda_stack.core.config_loader import GameConfig, get_config
from panda_stack.core.entity import Entity
from panda_stack.core.events import FeedbackHooks, GameEvent
from panda_stack.core.input import InputBuffer
from panda_stack.core.rules import GameRules
from panda_stack.core.session import Phase, SessionState
from panda_stack.core.stack import Stack
from panda_stack.core.stacking import LandingDecision, StackingResolver
from panda_stack.core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


@dataclass
class TickResult:
    """Result of a single game tick."""
    landed: bool
    missed: bool
    game_over: bool
    camera_shifted: bool
    delta_score: int
    final_score: Optional[int] = None
    decision: Optional[LandingDecision] = None


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Falling panda update and spawning
    - Landing resolution against the stack or the ground
    - Camera scroll
    - Lives, score and round resets
    - Buffered input and feedback events

    One tick = one display refresh. The game never blocks: when the last life
    is lost the round is reset at once, the session phase reads GAME_OVER
    until the next tick, and the presentation layer decides how to show it.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        hooks: Optional[FeedbackHooks] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for spawn positions.
            hooks: Feedback hook registry. A private one is created if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        # Initialize subsystems
        self._rules = GameRules(config, seed)
        self._resolver = StackingResolver(config)
        self._camera = Camera(config)
        self._session = SessionState(config)
        self._stack = Stack()
        self._input = InputBuffer()
        self._hooks = hooks if hooks is not None else FeedbackHooks()
        self._snapshot_builder = SnapshotBuilder(config)

        # Game state
        self._falling: Optional[Entity] = None
        self._next_uid: int = 0
        self._ticks: int = 0

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def hooks(self) -> FeedbackHooks:
        return self._hooks

    @property
    def falling(self) -> Optional[Entity]:
        """The panda currently falling, if any."""
        return self._falling

    @property
    def stack(self) -> Stack:
        return self._stack

    @property
    def camera(self) -> Camera:
        return self._camera

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def rules(self) -> GameRules:
        return self._rules

    @property
    def score(self) -> int:
        """Current score."""
        return self._session.score

    @property
    def lives(self) -> int:
        return self._session.lives

    @property
    def ticks(self) -> int:
        """Ticks since the last reset."""
        return self._ticks

    @property
    def phase(self) -> Phase:
        return self._session.phase

    @property
    def stack_height(self) -> float:
        return self._stack.height(self._config.entity.height)

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Reset game to initial state.

        Args:
            seed: New random seed. Continues the previous sequence if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed

        self._rules.reset(seed)
        self._camera.reset()
        self._session.reset()
        self._stack.clear()
        self._input.clear()

        self._falling = None
        self._ticks = 0

        return self.snapshot()

    def spawn_falling(self, x: Optional[float] = None) -> Entity:
        """
        Create the next falling panda, replacing any current one.

        Args:
            x: Explicit left edge, or None for a random position.

        Returns:
            The new falling panda.
        """
        self._falling = self._rules.spawn.make_entity(self._next_uid, self._camera.offset, x)
        self._next_uid += 1
        return self._falling

    def queue_nudge(self, direction: int) -> None:
        """
        Queue a sideways move for the next tick.

        Args:
            direction: -1 for left, 1 for right.
        """
        self._input.push(direction)

    def tick(self) -> TickResult:
        """
        Advance the game by one frame.

        Returns:
            TickResult describing what happened.
        """
        self._ticks += 1
        if self._session.is_game_over:
            self._session.begin_round()

        self._apply_pending_input()

        if self._falling is None:
            self.spawn_falling()

        floor_y = self._config.floor_y
        self._falling.update(
            self._config.entity.gravity,
            self._camera.offset,
            self._config.board.width,
            floor_y
        )
        self._camera.update()

        score_before = self._session.score
        decision = self._resolver.evaluate(self._falling, self._stack, self._camera.offset)

        if decision.landed:
            shifted = self._land(decision)
            return TickResult(
                landed=True,
                missed=False,
                game_over=False,
                camera_shifted=shifted,
                delta_score=self._session.score - score_before,
                decision=decision
            )

        if self._rules.floor.at_floor(self._falling, self._camera.offset):
            final_score = self._miss()
            return TickResult(
                landed=False,
                missed=True,
                game_over=final_score is not None,
                camera_shifted=False,
                delta_score=0,
                final_score=final_score,
                decision=decision
            )

        return TickResult(
            landed=False,
            missed=False,
            game_over=False,
            camera_shifted=False,
            delta_score=0,
            decision=decision
        )

    def _apply_pending_input(self) -> None:
        """Apply every queued nudge. Nudges with no falling panda are dropped."""
        step = self._config.input.nudge_step
        for direction in self._input.drain():
            if self._falling is None:
                continue
            self._falling.x += direction * step
            self._hooks.emit(GameEvent.MOVE, direction=direction, x=self._falling.x)

    def _land(self, decision: LandingDecision) -> bool:
        """
        Settle the falling panda where the resolver decided.

        Returns:
            True if the camera shifted.
        """
        landed = self._falling
        previous_height = self.stack_height

        landed.y = decision.snap_y
        self._stack.append(landed)
        self._falling = None
        self._session.add_point()
        logger.debug(
            "Landed panda %d on %s at y=%.1f (score %d)",
            landed.uid, decision.reason, landed.y, self._session.score
        )
        self._hooks.emit(GameEvent.STACK, entity=landed, score=self._session.score)

        self.spawn_falling()

        if decision.reason != "stack":
            return False
        return self._camera.follow_stack(previous_height, self.stack_height)

    def _miss(self) -> Optional[int]:
        """
        Handle a failed landing at the floor.

        Returns:
            Final score if this miss ended the round, else None.
        """
        self._falling = None
        exhausted = self._session.lose_life()
        logger.info("Miss! Lives: %d", self._session.lives)
        self._hooks.emit(GameEvent.MISS, lives=self._session.lives)

        if not exhausted:
            self.spawn_falling()
            return None

        return self._end_round()

    def _end_round(self) -> int:
        """Report the final score and reinitialize the session."""
        final_score = self._session.score
        logger.info("Game over. Score: %d", final_score)
        self._hooks.emit(GameEvent.GAME_OVER, final_score=final_score)

        self._session.end_round()
        self._stack.clear()
        self._camera.reset()
        self._input.clear()
        self._falling = None
        return final_score

    def snapshot(self, board_rgb: Optional[np.ndarray] = None) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            falling=self._falling,
            stack=self._stack,
            lives=self._session.lives,
            score=self._session.score,
            ticks=self._ticks,
            camera_offset=self._camera.offset,
            board_rgb=board_rgb
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._session.score,
            "lives": self._session.lives,
            "ticks": self._ticks,
            "stack_count": len(self._stack),
            "stack_height": self.stack_height,
            "camera_offset": self._camera.offset,
            "final_score": self._session.final_score,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with panda rectangles, camera offset and UI values.
        """
        pandas = [dict(entity.to_dict(), falling=False) for entity in self._stack]
        if self._falling is not None:
            pandas.append(dict(self._falling.to_dict(), falling=True))

        return {
            "board_width": self._config.board.width,
            "board_height": self._config.board.height,
            "camera_offset": self._camera.render_offset,
            "pandas": pandas,
            "lives": self._session.lives,
            "score": self._session.score,
            "phase": self._session.phase.value,
            "final_score": self._session.final_score,
        }
