"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class BoardConfig:
    """Playfield geometry."""
    width: int                   # Screen width in logical pixels
    height: int                  # Screen height; also the floor line


@dataclass(frozen=True)
class EntityConfig:
    """Size and fall speed shared by every panda."""
    width: float
    height: float
    gravity: float               # Fall distance per tick


@dataclass(frozen=True)
class CameraConfig:
    """Camera scroll behavior."""
    shift_threshold_ratio: float  # Share of screen height the stack must exceed
    easing: bool                  # Animate the rendered offset toward the target
    easing_speed: float           # Max rendered offset change per tick


@dataclass(frozen=True)
class SessionConfig:
    """Round settings."""
    starting_lives: int


@dataclass(frozen=True)
class InputConfig:
    """Horizontal control parameters."""
    nudge_step: float            # Pixels moved per left/right event
    drag_threshold: float        # Drag distance that counts as one nudge


@dataclass(frozen=True)
class AssetConfig:
    """Image and sound file names, relative to the asset directory."""
    directory: str
    images: Dict[str, str]
    sounds: Dict[str, str]
    load_workers: int

    def resolve_directory(self) -> Path:
        """Asset directory as an absolute path (relative paths hang off the package)."""
        path = Path(self.directory)
        if not path.is_absolute():
            path = Path(os.path.dirname(os.path.dirname(__file__))) / path
        return path


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for the agent environment."""
    max_ticks: int
    max_stack: int               # Stack entries exported in observations


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    image_enabled: bool
    image_width: int
    image_height: int
    render_style: str
    frame_skip: int


@dataclass(frozen=True)
class RenderConfig:
    """Frame rate and placeholder palette."""
    fps: int
    grass_height: int
    sky_color: Color
    grass_color: Color
    panda_color: Color
    falling_color: Color
    lives_color: Color
    text_color: Color


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    entity: EntityConfig
    camera: CameraConfig
    session: SessionConfig
    input: InputConfig
    assets: AssetConfig
    caps: CapsConfig
    observation: ObservationConfig
    render: RenderConfig

    @property
    def floor_y(self) -> float:
        """Floor line in screen space."""
        return float(self.board.height)

    @property
    def camera_threshold(self) -> float:
        """Stack height beyond which the camera shifts."""
        return self.board.height * self.camera.shift_threshold_ratio

    def get_image_file(self, name: str) -> str:
        """Get the file name of a named image."""
        if name in self.assets.images:
            return self.assets.images[name]
        raise ValueError(f"Unknown image: {name}")

    def get_sound_file(self, name: str) -> str:
        """Get the file name of a named sound."""
        if name in self.assets.sounds:
            return self.assets.sounds[name]
        raise ValueError(f"Unknown sound: {name}")


def _parse_color(color_data) -> Color:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    return (int(color_data[0]), int(color_data[1]), int(color_data[2]))


def _parse_names(section: Optional[dict]) -> Dict[str, str]:
    return {str(k): str(v) for k, v in (section or {}).items()}


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    if config.board.width <= 0 or config.board.height <= 0:
        raise ValueError(
            f"Board size must be positive, got {config.board.width}x{config.board.height}"
        )

    if config.entity.width <= 0 or config.entity.height <= 0:
        raise ValueError("Entity size must be positive")

    if config.entity.width > config.board.width or config.entity.height > config.board.height:
        raise ValueError(
            f"Entity ({config.entity.width}x{config.entity.height}) does not fit the "
            f"board ({config.board.width}x{config.board.height})"
        )

    if config.entity.gravity <= 0:
        raise ValueError(f"gravity must be positive, got {config.entity.gravity}")

    if not 0.0 < config.camera.shift_threshold_ratio <= 1.0:
        raise ValueError(
            f"shift_threshold_ratio must be in (0, 1], got {config.camera.shift_threshold_ratio}"
        )

    if config.camera.easing and config.camera.easing_speed <= 0:
        raise ValueError("easing_speed must be positive when easing is enabled")

    if config.session.starting_lives < 1:
        raise ValueError(f"starting_lives must be at least 1, got {config.session.starting_lives}")

    if config.caps.max_stack < 1:
        raise ValueError(f"max_stack must be at least 1, got {config.caps.max_stack}")

    if config.observation.frame_skip < 1:
        raise ValueError(f"frame_skip must be at least 1, got {config.observation.frame_skip}")

    # Validate render style
    if config.observation.render_style not in ("solid", "full"):
        raise ValueError(f"render_style must be 'solid' or 'full', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"])
    )

    entity_data = raw["entity"]
    entity = EntityConfig(
        width=float(entity_data["width"]),
        height=float(entity_data["height"]),
        gravity=float(entity_data["gravity"])
    )

    camera_data = raw.get("camera", {})
    camera = CameraConfig(
        shift_threshold_ratio=float(camera_data.get("shift_threshold_ratio", 0.5)),
        easing=bool(camera_data.get("easing", False)),
        easing_speed=float(camera_data.get("easing_speed", 5.0))
    )

    session_data = raw.get("session", {})
    session = SessionConfig(
        starting_lives=int(session_data.get("starting_lives", 3))
    )

    input_data = raw.get("input", {})
    input_config = InputConfig(
        nudge_step=float(input_data.get("nudge_step", 10)),
        drag_threshold=float(input_data.get("drag_threshold", 10))
    )

    assets_data = raw.get("assets", {})
    assets = AssetConfig(
        directory=str(assets_data.get("directory", "assets")),
        images=_parse_names(assets_data.get("images")),
        sounds=_parse_names(assets_data.get("sounds")),
        load_workers=int(assets_data.get("load_workers", 2))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 20000)),
        max_stack=int(caps_data.get("max_stack", 64))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        image_enabled=bool(obs_data.get("image_enabled", False)),
        image_width=int(obs_data.get("image_width", 200)),
        image_height=int(obs_data.get("image_height", 150)),
        render_style=str(obs_data.get("render_style", "solid")),
        frame_skip=int(obs_data.get("frame_skip", 1))
    )

    render_data = raw.get("render", {})
    render = RenderConfig(
        fps=int(render_data.get("fps", 60)),
        grass_height=int(render_data.get("grass_height", 50)),
        sky_color=_parse_color(render_data.get("sky_color", [135, 206, 235])),
        grass_color=_parse_color(render_data.get("grass_color", [34, 139, 34])),
        panda_color=_parse_color(render_data.get("panda_color", [0, 0, 0])),
        falling_color=_parse_color(render_data.get("falling_color", [60, 60, 60])),
        lives_color=_parse_color(render_data.get("lives_color", [220, 0, 0])),
        text_color=_parse_color(render_data.get("text_color", [0, 0, 0]))
    )

    config = GameConfig(
        board=board,
        entity=entity,
        camera=camera,
        session=session,
        input=input_config,
        assets=assets,
        caps=caps,
        observation=observation,
        render=render
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
