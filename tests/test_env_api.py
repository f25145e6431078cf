"""
Tests for Gymnasium environment API.
"""

import pytest
import numpy as np

from panda_stack.core.env_gym import PandaStackEnv


@pytest.fixture
def env():
    env = PandaStackEnv()
    yield env
    env.close()


def steer_away(game):
    """Keep the falling panda clear of a tower built at x=375."""
    if game.falling is not None:
        game.falling.x = 0.0


class TestPandaStackEnv:
    """Test single environment API."""

    def test_reset_returns_obs_and_info(self, env):
        """Reset should return (observation, info) tuple."""
        obs, info = env.reset(seed=42)

        assert isinstance(obs, dict)
        assert isinstance(info, dict)
        assert info["delta_score"] == 0
        assert info["lives"] == 3

    def test_observation_structure(self, env):
        """Observation should have expected keys and shapes."""
        obs, _ = env.reset(seed=42)

        for key in ("falling_present", "falling_x", "falling_y", "lives", "score",
                    "camera_offset", "stack_height", "stack_count"):
            assert key in obs

        max_stack = env.config.caps.max_stack
        assert obs["stack_x"].shape == (max_stack,)
        assert obs["stack_y"].shape == (max_stack,)
        assert obs["stack_mask"].shape == (max_stack,)
        assert "board_rgb" not in obs

    def test_observation_in_space(self, env):
        """Observations should be members of the observation space."""
        obs, _ = env.reset(seed=42)
        assert env.observation_space.contains(obs)

        obs, *_ = env.step(0)
        assert env.observation_space.contains(obs)

    def test_step_returns_five_values(self, env):
        """Step should return (obs, reward, terminated, truncated, info)."""
        env.reset(seed=42)

        obs, reward, terminated, truncated, info = env.step(0)

        assert isinstance(obs, dict)
        assert reward == 0.0
        assert terminated is False
        assert truncated is False
        assert "landings" in info
        assert "misses" in info

    def test_numpy_action_accepted(self, env):
        env.reset(seed=42)
        env.step(np.array(2))
        env.step(np.int64(1))

    def test_invalid_action_raises(self, env):
        """Actions outside Discrete(3) are rejected."""
        env.reset(seed=42)
        with pytest.raises(ValueError):
            env.step(3)

    def test_invalid_render_mode_raises(self):
        with pytest.raises(ValueError):
            PandaStackEnv(render_mode="ascii")

    def test_action_nudges_falling_panda(self, env):
        """Action 2 moves the falling panda right by one nudge."""
        env.reset(seed=42)
        env.step(0)
        x_before = env.game.falling.x

        obs, *_ = env.step(2)

        assert obs["falling_x"] == pytest.approx(x_before + env.config.input.nudge_step)

    def test_deterministic_with_seed(self):
        """Same seed and actions produce the same trajectory."""
        trajectories = []
        for _ in range(2):
            env = PandaStackEnv()
            env.reset(seed=7)
            xs = []
            for i in range(600):
                obs, *_ = env.step(i % 3)
                xs.append(float(obs["falling_x"]))
            trajectories.append(xs)
            env.close()

        assert trajectories[0] == trajectories[1]

    def test_reward_always_zero(self, env):
        env.reset(seed=0)
        for i in range(400):
            _, reward, *_ = env.step(i % 3)
            assert reward == 0.0

    def test_landing_reported_in_info(self, env):
        env.reset(seed=42)
        landings = 0
        for _ in range(400):
            _, _, _, _, info = env.step(0)
            landings += info["landings"]
            if landings:
                break
        assert landings == 1
        assert info["score"] == 1
        assert info["delta_score"] == 1


class TestEpisodeEnd:

    def test_terminated_when_lives_run_out(self, env):
        """Missing with the last life terminates with the final score."""
        env.reset(seed=42)
        game = env.game
        game.spawn_falling(x=375)

        terminated = False
        info = {}
        for _ in range(5000):
            if game.score >= 1:
                steer_away(game)
            _, _, terminated, truncated, info = env.step(0)
            if terminated:
                break

        assert terminated
        assert info["terminated_reason"] == "lives_exhausted"
        assert info["final_score"] == 1
        assert info["score"] == 0
        assert info["lives"] == 3

    def test_truncated_at_tick_cap(self, write_config):
        """Episodes are truncated once the tick cap is hit."""
        env = PandaStackEnv(config_path=write_config(caps={"max_ticks": 5}))
        env.reset(seed=1)

        truncated = False
        for _ in range(5):
            _, _, terminated, truncated, info = env.step(0)

        assert truncated
        assert not terminated
        assert info["terminated_reason"] == "tick_cap"
        env.close()

    def test_frame_skip_runs_multiple_ticks(self):
        env = PandaStackEnv(frame_skip=4)
        env.reset(seed=3)
        _, _, _, _, info = env.step(0)
        assert info["ticks"] == 4
        env.close()


class TestImageObservation:

    def test_board_rgb_shape(self):
        """Solid-rendered image observation has the configured size."""
        env = PandaStackEnv(image_obs=True, image_width=80, image_height=60)
        obs, _ = env.reset(seed=42)

        assert obs["board_rgb"].shape == (60, 80, 3)
        assert obs["board_rgb"].dtype == np.uint8
        assert env.observation_space.contains(obs)
        env.close()

    def test_rgb_array_render(self):
        env = PandaStackEnv(render_mode="rgb_array")
        env.reset(seed=42)
        frame = env.render()
        assert frame.shape == (env.config.observation.image_height,
                               env.config.observation.image_width, 3)
        env.close()

    def test_full_render_uses_loaded_images(self, write_config, tmp_path):
        """The full-style renderer draws panda images found in the asset directory."""
        pygame = pytest.importorskip("pygame")
        surface = pygame.Surface((50, 50))
        surface.fill((255, 255, 255))
        pygame.image.save(surface, str(tmp_path / "panda.png"))

        env = PandaStackEnv(
            config_path=write_config(assets={"directory": str(tmp_path)}),
            render_mode="rgb_array",
            render_style="full",
            image_width=800,
            image_height=600,
        )
        env.reset(seed=42)
        env.render()
        env.assets.wait()

        env.game.spawn_falling(x=375)
        for _ in range(400):
            _, _, _, _, info = env.step(0)
            if info["landings"]:
                break

        frame = env.render()
        assert tuple(frame[575, 400]) == (255, 255, 255)
        env.close()
