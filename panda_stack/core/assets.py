"""
Asset Library
=============

Loads images and sounds in the background. Each asset is PENDING until its
load finishes, then READY or MISSING. Callers draw a placeholder or stay
silent for anything that is not READY.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from panda_stack.core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


class AssetState(Enum):
    PENDING = "pending"
    READY = "ready"
    MISSING = "missing"


@dataclass
class Asset:
    """A named asset and its load state."""
    name: str
    path: Path
    state: AssetState = AssetState.PENDING
    value: Optional[Any] = None


def _load_image(path: Path):
    return pygame.image.load(str(path))


def _load_sound(path: Path):
    if not pygame.mixer.get_init():
        raise RuntimeError("mixer not initialized")
    return pygame.mixer.Sound(str(path))


class AssetLibrary:
    """
    Background loader for the game's images and sounds.

    Loading is fire-and-forget: `start_loading()` returns at once and each
    asset flips from PENDING to READY or MISSING when its worker finishes.
    Nothing here raises during play.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        directory: Optional[Path] = None,
        enable_sound: bool = True
    ):
        """
        Initialize asset library.

        Args:
            config: Game configuration. Uses default if None.
            directory: Asset directory. Uses the configured one if None.
            enable_sound: Load sounds at all.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._directory = Path(directory) if directory is not None else config.assets.resolve_directory()
        self._enable_sound = enable_sound

        self._images: Dict[str, Asset] = {
            name: Asset(name, self._directory / filename)
            for name, filename in config.assets.images.items()
        }
        self._sounds: Dict[str, Asset] = {
            name: Asset(name, self._directory / filename)
            for name, filename in config.assets.sounds.items()
        }

        self._executor: Optional[ThreadPoolExecutor] = None

    def start_loading(self) -> None:
        """Submit every asset to the background loader."""
        if not PYGAME_AVAILABLE:
            for asset in list(self._images.values()) + list(self._sounds.values()):
                asset.state = AssetState.MISSING
            return

        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=max(1, self._config.assets.load_workers),
                thread_name_prefix="assets"
            )

        for asset in self._images.values():
            self._submit(asset, _load_image)

        for asset in self._sounds.values():
            if self._enable_sound:
                self._submit(asset, _load_sound)
            else:
                asset.state = AssetState.MISSING

    def _submit(self, asset: Asset, loader: Callable[[Path], Any]) -> None:
        if not asset.path.exists():
            logger.warning("Asset %s not found at %s", asset.name, asset.path)
            asset.state = AssetState.MISSING
            return

        future = self._executor.submit(loader, asset.path)
        future.add_done_callback(lambda f, a=asset: self._finish(a, f))

    def _finish(self, asset: Asset, future: Future) -> None:
        """Record the outcome of one load."""
        if future.cancelled():
            asset.state = AssetState.MISSING
            return
        error = future.exception()
        if error is not None:
            logger.warning("Could not load %s: %s", asset.name, error)
            asset.state = AssetState.MISSING
            return
        asset.value = future.result()
        asset.state = AssetState.READY

    def image_state(self, name: str) -> AssetState:
        asset = self._images.get(name)
        return asset.state if asset is not None else AssetState.MISSING

    def image(self, name: str):
        """Loaded surface, or None while pending or missing."""
        asset = self._images.get(name)
        if asset is None or asset.state is not AssetState.READY:
            return None
        return asset.value

    def sound_state(self, name: str) -> AssetState:
        asset = self._sounds.get(name)
        return asset.state if asset is not None else AssetState.MISSING

    def play(self, name: str) -> None:
        """Play a sound if it is loaded; silent otherwise."""
        asset = self._sounds.get(name)
        if asset is None or asset.state is not AssetState.READY:
            return
        try:
            asset.value.play()
        except pygame.error as e:
            logger.debug("Sound %s failed to play: %s", name, e)

    def wait(self) -> None:
        """Block until all submitted loads finish (tools and tests only)."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def close(self) -> None:
        """Cancel queued loads and wait for running ones before pygame shuts down."""
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None
