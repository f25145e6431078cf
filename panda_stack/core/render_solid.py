"""
Solid Renderer
==============

Fast numpy-based renderer that draws the playfield as flat-colored
rectangles. Needs no display and no pygame.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from panda_stack.core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the game as solid-color rectangles.

    Sky, grass band, settled pandas and the falling panda each get one color
    from the render palette; the camera offset is applied like the full
    renderer does.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        palette = config.render
        self._sky_color = np.array(palette.sky_color, dtype=np.uint8)
        self._grass_color = np.array(palette.grass_color, dtype=np.uint8)
        self._panda_color = np.array(palette.panda_color, dtype=np.uint8)
        self._falling_color = np.array(palette.falling_color, dtype=np.uint8)
        self._grass_height = palette.grass_height

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._sky_color

        board_height = render_data["board_height"]
        sx = width / render_data["board_width"]
        sy = height / board_height
        camera = render_data["camera_offset"]

        grass_top = board_height - self._grass_height + camera
        self._fill(img, 0, grass_top * sy, width, (grass_top + self._grass_height) * sy, self._grass_color)

        for panda in render_data["pandas"]:
            top = (panda["y"] + camera) * sy
            left = panda["x"] * sx
            color = self._falling_color if panda.get("falling") else self._panda_color
            self._fill(
                img,
                left,
                top,
                left + panda["width"] * sx,
                top + panda["height"] * sy,
                color
            )

        return img

    @staticmethod
    def _fill(img: np.ndarray, x0: float, y0: float, x1: float, y1: float, color: np.ndarray) -> None:
        """Fill a rectangle, clipped to the image."""
        height, width = img.shape[:2]
        x0 = max(0, int(x0))
        y0 = max(0, int(y0))
        x1 = min(width, int(x1))
        y1 = min(height, int(y1))
        if x0 >= x1 or y0 >= y1:
            return
        img[y0:y1, x0:x1] = color

    def close(self) -> None:
        pass
