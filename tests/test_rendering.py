"""
Tests for renderers and background asset loading.
"""

import numpy as np
import pytest

from panda_stack.core.assets import AssetLibrary, AssetState
from panda_stack.core.config_loader import load_config
from panda_stack.core.game import CoreGame
from panda_stack.core.render_solid import SolidRenderer

from conftest import drop_at



@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    g = CoreGame(config=config, seed=42)
    g.reset()
    return g


class TestSolidRenderer:

    def test_output_shape(self, game, config):
        img = SolidRenderer(config).render(game.get_render_data(), 200, 150)
        assert img.shape == (150, 200, 3)
        assert img.dtype == np.uint8

    def test_sky_grass_and_panda_colors(self, game, config):
        drop_at(game, 375)
        img = SolidRenderer(config).render(game.get_render_data(), 800, 600)

        assert tuple(img[10, 10]) == config.render.sky_color
        assert tuple(img[590, 10]) == config.render.grass_color
        assert tuple(img[575, 400]) == config.render.panda_color

    def test_falling_panda_color(self, game, config):
        panda = game.spawn_falling(x=100)
        panda.y = 200
        img = SolidRenderer(config).render(game.get_render_data(), 800, 600)
        assert tuple(img[225, 125]) == config.render.falling_color

    def test_camera_moves_grass_down(self, game, config):
        data = game.get_render_data()
        data["camera_offset"] = 50
        img = SolidRenderer(config).render(data, 800, 600)
        # Grass band starts below the visible area
        assert tuple(img[560, 10]) == config.render.sky_color


class TestAssetLibrary:

    def test_missing_files_fall_back(self, config, tmp_path):
        assets = AssetLibrary(config, directory=tmp_path, enable_sound=False)
        assets.start_loading()
        assets.wait()

        assert assets.image_state("panda") is AssetState.MISSING
        assert assets.image("panda") is None
        assert assets.sound_state("drop") is AssetState.MISSING
        assets.play("drop")
        assets.close()

    def test_unknown_name_is_missing(self, config, tmp_path):
        assets = AssetLibrary(config, directory=tmp_path)
        assert assets.image_state("bamboo") is AssetState.MISSING
        assert assets.image("bamboo") is None

    def test_pending_before_loading(self, config, tmp_path):
        assets = AssetLibrary(config, directory=tmp_path)
        assert assets.image_state("sky") is AssetState.PENDING
        assert assets.image("sky") is None

    def test_image_loads_in_background(self, config, tmp_path):
        pygame = pytest.importorskip("pygame")
        surface = pygame.Surface((50, 50))
        surface.fill((255, 255, 255))
        pygame.image.save(surface, str(tmp_path / "panda.png"))

        assets = AssetLibrary(config, directory=tmp_path, enable_sound=False)
        assets.start_loading()
        assets.wait()

        assert assets.image_state("panda") is AssetState.READY
        assert assets.image("panda") is not None
        assert assets.image_state("sky") is AssetState.MISSING

    def test_close_leaves_nothing_pending(self, config, tmp_path):
        """Closing waits for running loads and cancels queued ones."""
        pygame = pytest.importorskip("pygame")
        for name in ("panda", "grass", "sky"):
            pygame.image.save(pygame.Surface((20, 20)), str(tmp_path / f"{name}.png"))

        assets = AssetLibrary(config, directory=tmp_path, enable_sound=False)
        assets.start_loading()
        assets.close()

        for name in ("panda", "grass", "sky"):
            assert assets.image_state(name) in (AssetState.READY, AssetState.MISSING)


class TestPygameRenderer:

    def test_placeholders_without_assets(self, game, config):
        pytest.importorskip("pygame")
        from panda_stack.core.render_pygame import PygameRenderer

        drop_at(game, 375)
        renderer = PygameRenderer(config)
        img = renderer.render(game.get_render_data(), 800, 600)

        assert img.shape == (600, 800, 3)
        assert tuple(img[10, 10]) == config.render.sky_color
        assert tuple(img[575, 400]) == config.render.panda_color
        renderer.close()

    def test_uses_loaded_panda_image(self, game, config, tmp_path):
        pygame = pytest.importorskip("pygame")
        from panda_stack.core.render_pygame import PygameRenderer

        surface = pygame.Surface((50, 50))
        surface.fill((255, 255, 255))
        pygame.image.save(surface, str(tmp_path / "panda.png"))
        assets = AssetLibrary(config, directory=tmp_path, enable_sound=False)
        assets.start_loading()
        assets.wait()

        drop_at(game, 375)
        renderer = PygameRenderer(config, assets)
        img = renderer.render(game.get_render_data(), 800, 600)

        assert tuple(img[575, 400]) == (255, 255, 255)
        renderer.close()

    def test_scaled_sky_cache_stays_bounded(self, game, config, tmp_path):
        """Camera shifts replace the scaled sky instead of adding new entries."""
        pygame = pytest.importorskip("pygame")
        from panda_stack.core.render_pygame import PygameRenderer

        pygame.image.save(pygame.Surface((10, 10)), str(tmp_path / "sky.png"))
        assets = AssetLibrary(config, directory=tmp_path, enable_sound=False)
        assets.start_loading()
        assets.wait()
        assert assets.image_state("sky") is AssetState.READY

        renderer = PygameRenderer(config, assets)
        for _ in range(20):
            drop_at(game, 375)
            renderer.render(game.get_render_data(), 800, 600)

        assert game.camera.offset > 0
        assert len(renderer._scaled_cache) == 1
        size, _ = renderer._scaled_cache["sky"]
        assert size == (800, 600 + int(game.camera.offset))
        renderer.close()
