"""
Pygame Renderer
===============

Draws the playfield with images when they are loaded and placeholder shapes
when they are not. Supports both display mode (human play) and headless RGB
output.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from panda_stack.core.assets import AssetLibrary
from panda_stack.core.config_loader import GameConfig, get_config


class PygameRenderer:
    """
    Renderer using pygame.

    Supports:
    - Sky, grass and panda images with placeholder fallbacks
    - Lives and score overlay
    - Non-blocking game-over notice
    - Screen display for human mode
    - RGB array output for agents
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        assets: Optional[AssetLibrary] = None
    ):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            assets: Loaded or loading assets. Placeholders only if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config
        self._assets = assets
        self._palette = config.render

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Fonts
        pygame.font.init()
        self._font = pygame.font.Font(None, 28)
        self._font_large = pygame.font.Font(None, 56)

        # name -> (size, scaled image); one entry per image, replaced on resize
        self._scaled_cache: Dict[str, Tuple[Tuple[int, int], pygame.Surface]] = {}

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data, show_ui=False)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        show_game_over: bool = False
    ) -> None:
        """
        Render to the pygame window at board size.

        Args:
            render_data: Data from CoreGame.get_render_data().
            show_game_over: Draw the end-of-round notice on top.
        """
        size = (render_data["board_width"], render_data["board_height"])
        if self._screen is None or self._screen_size != size:
            self._screen = pygame.display.set_mode(size)
            self._screen_size = size
            pygame.display.set_caption("Panda Stack")

        self._render_to_surface(self._screen, render_data)
        if show_game_over:
            self._draw_game_over(self._screen, render_data.get("final_score") or 0)
        pygame.display.flip()

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any],
        show_ui: bool = True
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()
        sx = width / render_data["board_width"]
        sy = height / render_data["board_height"]
        camera = render_data["camera_offset"]

        self._draw_sky(surface, camera, sx, sy)
        self._draw_grass(surface, render_data["board_height"], camera, sx, sy)

        for panda in render_data["pandas"]:
            self._draw_panda(surface, panda, camera, sx, sy)

        if show_ui:
            self._draw_ui(surface, render_data)

    def _image(self, name: str, size: Tuple[int, int]) -> Optional[pygame.Surface]:
        """Scaled image if loaded, else None. Checked once per draw call."""
        if self._assets is None:
            return None
        base = self._assets.image(name)
        if base is None:
            return None

        cached = self._scaled_cache.get(name)
        if cached is None or cached[0] != size:
            cached = (size, pygame.transform.smoothscale(base, size))
            self._scaled_cache[name] = cached
        return cached[1]

    def _draw_sky(self, surface: pygame.Surface, camera: float, sx: float, sy: float) -> None:
        width, height = surface.get_size()
        sky = self._image("sky", (width, max(1, int((height / sy + camera) * sy))))
        if sky is not None:
            surface.blit(sky, (0, int(-camera * sy)))
        else:
            surface.fill(self._palette.sky_color)

    def _draw_grass(
        self,
        surface: pygame.Surface,
        board_height: float,
        camera: float,
        sx: float,
        sy: float
    ) -> None:
        width = surface.get_width()
        grass_height = self._palette.grass_height
        if self._assets is not None:
            base = self._assets.image("grass")
            if base is not None:
                grass_height = base.get_height()

        rect_height = max(1, int(grass_height * sy))
        top = int((board_height - grass_height + camera) * sy)
        grass = self._image("grass", (width, rect_height))
        if grass is not None:
            surface.blit(grass, (0, top))
        else:
            pygame.draw.rect(surface, self._palette.grass_color, (0, top, width, rect_height))

    def _draw_panda(
        self,
        surface: pygame.Surface,
        panda: Dict[str, Any],
        camera: float,
        sx: float,
        sy: float
    ) -> None:
        rect = pygame.Rect(
            int(panda["x"] * sx),
            int((panda["y"] + camera) * sy),
            max(1, int(panda["width"] * sx)),
            max(1, int(panda["height"] * sy))
        )
        image = self._image("panda", rect.size)
        if image is not None:
            surface.blit(image, rect.topleft)
            return

        color = self._palette.falling_color if panda.get("falling") else self._palette.panda_color
        pygame.draw.rect(surface, color, rect)

    def _draw_heart(self, surface: pygame.Surface, x: int, y: int, size: int) -> None:
        r = size // 4
        color = self._palette.lives_color
        pygame.draw.circle(surface, color, (x + r, y + r), r)
        pygame.draw.circle(surface, color, (x + 3 * r, y + r), r)
        pygame.draw.polygon(surface, color, [(x, y + r), (x + size, y + r), (x + size // 2, y + size)])

    def _draw_ui(self, surface: pygame.Surface, render_data: Dict[str, Any]) -> None:
        """Draw lives (left) and score (center)."""
        width = surface.get_width()

        label = self._font.render("Lives:", True, self._palette.lives_color)
        surface.blit(label, (10, 14))
        x = 14 + label.get_width()
        for _ in range(render_data["lives"]):
            self._draw_heart(surface, x, 16, 16)
            x += 22

        score = self._font.render(f"Score: {render_data['score']}", True, self._palette.text_color)
        surface.blit(score, (width // 2 - score.get_width() // 2, 14))

    def _draw_game_over(self, surface: pygame.Surface, final_score: int) -> None:
        """Draw game over overlay."""
        width, height = surface.get_size()
        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 150))
        surface.blit(overlay, (0, 0))

        title = self._font_large.render("GAME OVER", True, (255, 255, 255))
        surface.blit(title, ((width - title.get_width()) // 2, height // 2 - 60))

        score = self._font.render(f"Score: {final_score}", True, (255, 255, 255))
        surface.blit(score, ((width - score.get_width()) // 2, height // 2))

        hint = self._font.render("Press any key to play again", True, (220, 220, 220))
        surface.blit(hint, ((width - hint.get_width()) // 2, height // 2 + 40))

    def close(self) -> None:
        """Clean up pygame resources."""
        self._scaled_cache.clear()
        if self._screen is not None:
            self._screen = None
