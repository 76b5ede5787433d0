import gymnasium as gym
import numpy as np

import falling_blocks.env  # noqa: F401
from falling_blocks.env import FallingBlocksEnv
from falling_blocks.game import Action, GamePhase
from falling_blocks.rl.random_agent import run_random


def test_reset_returns_observation_in_space():
    env = FallingBlocksEnv()
    obs, info = env.reset(seed=3)
    assert obs.shape == (20, 10)
    assert obs.dtype == np.int8
    assert env.observation_space.contains(obs)
    assert env.game.phase is GamePhase.RUNNING
    assert info["score"] == 0 and info["level"] == 1
    # falling piece is overlaid as negative tokens
    assert (obs < 0).sum() == 4


def test_same_seed_same_first_piece():
    env = FallingBlocksEnv()
    kinds = []
    for _ in range(2):
        env.reset(seed=11)
        kinds.append(env.game.current_piece.kind)
    assert kinds[0] == kinds[1]


def test_step_advances_simulated_time():
    env = FallingBlocksEnv(frame_ms=500)
    env.reset(seed=0)
    y0 = env.game.current_piece.y
    env.step(int(Action.NONE))
    assert env.game.current_piece.y == y0
    obs, reward, terminated, truncated, info = env.step(int(Action.NONE))
    assert env.game.current_piece.y == y0 + 1
    assert reward == 0.0
    assert not terminated and not truncated


def test_soft_drops_until_game_over():
    env = FallingBlocksEnv(max_episode_steps=5000)
    env.reset(seed=1)
    terminated = False
    reward = 0.0
    for _ in range(5000):
        _, reward, terminated, truncated, info = env.step(int(Action.SOFT_DROP))
        if terminated or truncated:
            break
    assert terminated
    assert reward <= -1.0 + info["lines_this_step"]
    assert env.game.phase is GamePhase.GAME_OVER


def test_truncation_after_max_steps():
    env = FallingBlocksEnv(max_episode_steps=3)
    env.reset(seed=0)
    results = [env.step(int(Action.NONE)) for _ in range(3)]
    assert [r[3] for r in results] == [False, False, True]


def test_rgb_render():
    env = FallingBlocksEnv(render_mode="rgb_array")
    env.reset(seed=0)
    img = env.render()
    assert img.shape == (240, 120, 3)
    assert FallingBlocksEnv().render() is None


def test_registered_env_and_random_agent():
    env = gym.make("FallingBlocks-10x20-v0")
    obs, _ = env.reset(seed=5)
    assert obs.shape == (20, 10)
    env.close()
    assert isinstance(run_random(steps=300, seed=2), float)
