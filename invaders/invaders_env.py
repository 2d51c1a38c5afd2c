"""
InvadersEnv - headless gymnasium driver over the invaders simulation
--------------------------------------------------------------------
- Gymnasium API around Simulation (one step() == one frame)
- MultiDiscrete action space: [move(3), shoot(2)]
- Vector observation: player state + top-K nearest enemies + top-M nearest enemy shots
- Reward from score gained, lives lost and game over
- Cleared levels advance automatically; game over terminates

Quick test:
    python -m invaders.invaders_env

Rendering needs a display; without one the window fails to open and the
env keeps running headless.
"""

from __future__ import annotations

import time
import warnings
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .collaborators import NullRenderer
from .simulation import GameState, Simulation
from .utils import center_x, clamp, seed_everything

DEFAULT_REWARD_CONFIG = {
    "R_SCORE": 0.01,    # per score point (kill = 10, level bonus = 100 * level)
    "R_LIFE": 1.0,      # per life lost
    "R_DEATH": 5.0,     # game over
    "R_TIME": 0.001,    # per step
}


class InvadersEnv(gym.Env):
    """Space invaders environment using the shared simulation core"""

    metadata = {"render_modes": ["human"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        width: int = 800,
        height: int = 600,
        max_steps: int = 5000,
        k_enemies: int = 5,
        m_projectiles: int = 3,
        shoot_cooldown_steps: int = 8,
        enemy_shoot_chance: Optional[float] = None,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        self.render_mode = render_mode

        # Arena
        self.width = width
        self.height = height
        self.max_steps = max_steps

        # Observation config
        self.k_enemies = k_enemies
        self.m_projectiles = m_projectiles

        # Gameplay config
        self.shoot_cooldown_steps = shoot_cooldown_steps
        self.enemy_shoot_chance = enemy_shoot_chance
        self.reward_config = dict(DEFAULT_REWARD_CONFIG)
        if reward_config:
            self.reward_config.update(
                {k: v for k, v in reward_config.items() if k in DEFAULT_REWARD_CONFIG}
            )

        # Action space:
        # move: 0 stay, 1 left, 2 right
        # shoot: 0/1
        self.action_space = spaces.MultiDiscrete([3, 2])

        # Player: x(1) lives(1) level(1) cooldown(1) enemies left(1)
        # Each enemy: rel pos(2) direction(1)
        # Each enemy projectile: rel pos(2)
        obs_dim = 5 + (self.k_enemies * 3) + (self.m_projectiles * 2)
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None
        self.sim = Simulation(width=width, height=height)
        self.sim.music_enabled = False

        self._step_count = 0
        self._cooldown = 0
        self._level_size = 1
        self._lives_lost = 0

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)
        seed_everything(seed)

        self._step_count = 0
        self._cooldown = 0
        self._lives_lost = 0

        name = (options or {}).get("player_name", "Agent")
        self.sim.new_game(name)
        self._on_new_level()

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, shoot = int(action[0]), int(action[1])

        score_before = self.sim.score
        lives_before = self.sim.lives

        if shoot == 1 and self._cooldown == 0 and self.sim.shoot():
            self._cooldown = self.shoot_cooldown_steps

        self.sim.step(move_left=(move == 1), move_right=(move == 2))

        if self._cooldown > 0:
            self._cooldown -= 1

        lives_lost = max(0, lives_before - self.sim.lives)
        self._lives_lost += lives_lost
        terminated = self.sim.state is GameState.GAME_OVER

        reward = self._compute_reward(self.sim.score - score_before, lives_lost, terminated)

        if self.sim.state is GameState.LEVEL_COMPLETE:
            self.sim.start_next_level()
            self._on_new_level()

        self._step_count += 1
        truncated = self._step_count >= self.max_steps

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def _on_new_level(self):
        self._level_size = max(1, len(self.sim.enemies))
        if self.enemy_shoot_chance is not None:
            for enemy in self.sim.enemies:
                enemy.shoot_chance = self.enemy_shoot_chance

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        sim = self.sim
        player = sim.player
        px, py = center_x(player), player.y

        obs_parts = [
            (px / self.width) * 2 - 1,
            clamp(sim.lives / max(1, sim.starting_lives), 0, 1) * 2 - 1,
            clamp(sim.level / 20.0, 0, 1) * 2 - 1,
            (self._cooldown / max(1, self.shoot_cooldown_steps)) * 2 - 1,
            (len(sim.enemies) / self._level_size) * 2 - 1,
        ]

        # Enemies: top-K nearest
        enemies_sorted = sorted(
            sim.enemies,
            key=lambda e: (center_x(e) - px) ** 2 + (e.y - py) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                obs_parts += [
                    clamp((center_x(e) - px) / self.width, -1, 1),
                    clamp((e.y - py) / self.height, -1, 1),
                    float(e.direction),
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0]

        # Enemy projectiles: top-M nearest
        shots_sorted = sorted(
            sim.enemy_projectiles,
            key=lambda b: (b.x - px) ** 2 + (b.y - py) ** 2
        )
        for i in range(self.m_projectiles):
            if i < len(shots_sorted):
                b = shots_sorted[i]
                obs_parts += [
                    clamp((b.x - px) / self.width, -1, 1),
                    clamp((b.y - py) / self.height, -1, 1),
                ]
            else:
                obs_parts += [0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self, score_delta: int, lives_lost: int, game_over: bool) -> float:
        cfg = self.reward_config
        reward = cfg["R_SCORE"] * score_delta
        reward -= cfg["R_LIFE"] * lives_lost
        reward -= cfg["R_TIME"]
        if game_over:
            reward -= cfg["R_DEATH"]
        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        return {
            "score": self.sim.score,
            "lives": self.sim.lives,
            "level": self.sim.level,
            "num_enemies": len(self.sim.enemies),
            "kills": self.sim.kills,
            "lives_lost": self._lives_lost,
            "state": self.sim.status.value,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering with Arcade
    # ----------------------------

    def render(self):
        if self.render_mode != "human":
            return None

        if self._window is None:
            try:
                from .play import AgentWindow
                self._window = AgentWindow(self, self.width, self.height)
            except Exception as exc:
                warnings.warn(f"Rendering disabled, could not open window: {exc}", RuntimeWarning)
                self.render_mode = None
                return None

        self._window.dispatch_events()
        self._window.on_draw()
        self._window.flip()
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None
        self.sim.renderer = NullRenderer()


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, seed: Optional[int] = 42) -> float:
    """Run a random episode for testing"""
    env = InvadersEnv(render_mode="human" if render else None)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(1 / 60)

    print(f"Random episode return: {total:.2f}  "
          f"(score {info['score']}, level {info['level']}, steps {info['step']})")

    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(render=True)
