"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the panda stacking game.
Reward is always 0.0 - agents compute their own from info.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np

import gymnasium as gym
from gymnasium import spaces

from panda_stack.core.assets import AssetLibrary
from panda_stack.core.config_loader import GameConfig, load_config
from panda_stack.core.game import CoreGame
from panda_stack.core.input import LEFT, RIGHT
from panda_stack.core.state_snapshot import GameSnapshot

# Discrete action -> nudge direction (0 = stay)
ACTION_TO_DIRECTION = {0: 0, 1: LEFT, 2: RIGHT}


class PandaStackEnv(gym.Env):
    """
    Panda stacking game as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = no move, 1 = nudge left, 2 = nudge right.
        Each step applies the action, then runs `frame_skip` ticks.

    Observation Space:
        Dict containing falling panda, session values, camera offset and
        padded stack arrays, plus an optional RGB image.

    Reward:
        Always 0.0. Agents compute their own reward from the info dict.

    Episode end:
        terminated when the last life is lost, truncated at caps.max_ticks.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        render_style: Optional[str] = None,
        image_obs: Optional[bool] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        frame_skip: Optional[int] = None,
    ):
        """
        Initialize environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for flat rectangles, "full" for pygame images.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            frame_skip: Override ticks per step.
        """
        super().__init__()

        self._config = load_config(config_path)
        obs_config = self._config.observation

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode}")

        self.render_mode = render_mode
        self._render_style = render_style or obs_config.render_style
        self._image_obs = obs_config.image_enabled if image_obs is None else image_obs
        self._frame_skip = frame_skip or obs_config.frame_skip

        self._img_width = image_width or obs_config.image_width
        self._img_height = image_height or obs_config.image_height

        self._game = CoreGame(config=self._config)

        # Initialize renderer and its assets (lazy)
        self._renderer = None
        self._assets: Optional[AssetLibrary] = None

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        board = self._config.board
        max_stack = self._config.caps.max_stack

        obs_dict = {
            "falling_present": spaces.Discrete(2),
            "falling_x": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "falling_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "lives": spaces.Box(low=0, high=self._config.session.starting_lives, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "camera_offset": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "stack_height": spaces.Box(low=0, high=np.inf, shape=(), dtype=np.float32),
            "stack_count": spaces.Box(low=0, high=np.iinfo(np.int32).max, shape=(), dtype=np.int32),
            "stack_x": spaces.Box(low=-np.inf, high=np.inf, shape=(max_stack,), dtype=np.float32),
            "stack_y": spaces.Box(low=-np.inf, high=board.height, shape=(max_stack,), dtype=np.float32),
            "stack_mask": spaces.MultiBinary(max_stack),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        snapshot = self._game.reset(seed=seed)

        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 0 (stay), 1 (left) or 2 (right).

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
            Reward is always 0.0.
        """
        if isinstance(action, np.ndarray):
            action = action.item()
        action = int(action)
        if action not in ACTION_TO_DIRECTION:
            raise ValueError(f"Invalid action: {action}")

        direction = ACTION_TO_DIRECTION[action]
        if direction:
            self._game.queue_nudge(direction)

        delta_score = 0
        landings = 0
        misses = 0
        round_over = False
        final_score = None

        for _ in range(self._frame_skip):
            result = self._game.tick()
            delta_score += result.delta_score
            landings += int(result.landed)
            misses += int(result.missed)
            if result.game_over:
                round_over = True
                final_score = result.final_score
                break

        term = self._game.rules.termination.check_termination(round_over, self._game.ticks)

        obs = self._snapshot_to_obs(self._game.snapshot())

        info = self._game.get_info()
        info["delta_score"] = delta_score
        info["landings"] = landings
        info["misses"] = misses
        info["terminated_reason"] = term.reason
        if final_score is not None:
            info["final_score"] = final_score

        if self.render_mode == "human":
            self.render()

        return obs, 0.0, term.terminated, term.truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        return self._renderer.render(render_data, self._img_width, self._img_height)

    def _init_renderer(self) -> None:
        """Initialize renderer based on style."""
        if self._render_style == "full" or self.render_mode == "human":
            try:
                from panda_stack.core.render_pygame import PygameRenderer
                if self._assets is None:
                    self._assets = AssetLibrary(self._config, enable_sound=False)
                    self._assets.start_loading()
                self._renderer = PygameRenderer(self._config, self._assets)
                return
            except ImportError:
                if self.render_mode == "human":
                    raise
        from panda_stack.core.render_solid import SolidRenderer
        self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._renderer is None:
                self._init_renderer()
            self._renderer.render_to_screen(self._game.get_render_data())
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None
        if self._assets is not None:
            self._assets.close()
            self._assets = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def assets(self) -> Optional[AssetLibrary]:
        """Images used by the full renderer, once it has been created."""
        return self._assets

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
