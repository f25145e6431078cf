"""
Human Play Mode
================

Play Panda Stack interactively with keyboard or touch/mouse drag.

Controls:
    - Left/Right arrows: Nudge the falling panda
    - Drag (touch or mouse): Nudge once per 10 px of travel
    - R: Restart game
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--config PATH] [--easing] [--no-sound]
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from panda_stack.core.assets import AssetLibrary
from panda_stack.core.config_loader import GameConfig, load_config
from panda_stack.core.events import GameEvent
from panda_stack.core.game import CoreGame
from panda_stack.core.input import DragTracker, LEFT, RIGHT
from panda_stack.core.render_pygame import PygameRenderer


class HumanPlayer:
    """
    Window, input and sound around a CoreGame.

    Input events only queue nudges; the game applies them at the start of the
    next tick. When a round ends the loop stops ticking and shows the notice
    until a key or click dismisses it.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: Optional[int] = None,
        enable_sound: bool = True
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._seed = seed
        self._target_fps = target_fps or config.render.fps

        pygame.init()
        if enable_sound:
            try:
                pygame.mixer.init()
            except pygame.error as e:
                print(f"Sound disabled: {e}")
                enable_sound = False

        self._clock = pygame.time.Clock()

        self._assets = AssetLibrary(config, enable_sound=enable_sound)
        self._assets.start_loading()

        self._game = CoreGame(config=config, seed=seed)
        self._game.reset(seed=seed)
        self._wire_feedback()

        self._renderer = PygameRenderer(config, self._assets)
        self._drag = DragTracker(config)

        # State
        self._running = True
        self._showing_game_over = False

    def _wire_feedback(self) -> None:
        hooks = self._game.hooks
        hooks.subscribe(GameEvent.STACK, lambda **_: self._assets.play("drop"))
        hooks.subscribe(GameEvent.MISS, lambda **_: self._assets.play("error"))
        hooks.subscribe(GameEvent.MOVE, lambda **_: self._assets.play("press"))
        hooks.subscribe(
            GameEvent.GAME_OVER,
            lambda final_score, **_: print(f"\nGAME OVER - Score: {final_score}")
        )

    def run(self) -> int:
        """Run the game loop. Returns the last final score (or current score)."""
        print("=== Panda Stack ===")
        print("Left/Right or drag to move the panda")
        print("R to restart, ESC to quit")
        print()

        while self._running:
            self._handle_events()

            if not self._showing_game_over:
                result = self._game.tick()
                if result.landed:
                    print(f"  +1 (Total: {self._game.score})")
                if result.game_over:
                    self._showing_game_over = True

            self._renderer.render_to_screen(
                self._game.get_render_data(),
                show_game_over=self._showing_game_over
            )
            self._clock.tick(self._target_fps)

        self._assets.close()
        pygame.quit()

        final = self._game.session.final_score
        return final if final is not None else self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        width = self._config.board.width

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif self._showing_game_over:
                    self._showing_game_over = False
                elif event.key == pygame.K_r:
                    self._restart()
                elif event.key == pygame.K_LEFT:
                    self._game.queue_nudge(LEFT)
                elif event.key == pygame.K_RIGHT:
                    self._game.queue_nudge(RIGHT)

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                if self._showing_game_over:
                    self._showing_game_over = False
                else:
                    self._drag.start(event.pos[0])

            elif event.type == pygame.MOUSEMOTION and self._drag.active:
                self._queue_drag(event.pos[0])

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self._drag.end()

            # Finger events report x normalized to [0, 1]
            elif event.type == pygame.FINGERDOWN:
                self._drag.start(event.x * width)

            elif event.type == pygame.FINGERMOTION:
                self._queue_drag(event.x * width)

            elif event.type == pygame.FINGERUP:
                self._drag.end()

    def _queue_drag(self, x: float) -> None:
        if self._game.falling is None:
            return
        direction = self._drag.move(x)
        if direction:
            self._game.queue_nudge(direction)

    def _restart(self) -> None:
        """Restart the game."""
        self._game.reset(seed=self._seed)
        self._showing_game_over = False
        self._drag.end()
        print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Panda Stack interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS (default: from config)")
    parser.add_argument("--config", type=str, default=None, help="Path to game_config.yaml")
    parser.add_argument("--easing", action="store_true", help="Animate camera scrolling")
    parser.add_argument("--no-sound", action="store_true", help="Disable sound effects")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = load_config(args.config)
        if args.easing:
            config = dataclasses.replace(
                config,
                camera=dataclasses.replace(config.camera, easing=True)
            )
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            enable_sound=not args.no_sound
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except (ImportError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
