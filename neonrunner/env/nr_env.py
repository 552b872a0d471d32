# neonrunner/env/nr_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from ..game.config import WIDTH, HEIGHT, FPS, SWIPE_MIN_DIST, PLAYER_START_X, PLAYER_START_Y
from ..game.renderer import draw_scene
from ..game.session import RunSession, GamePhase
from .observations import build_observation, obs_bounds

NOOP, TAP, SWIPE, HOLD = 0, 1, 2, 3
ACTION_NAMES = ("NOOP", "TAP", "SWIPE", "HOLD")

# screen-space point where the env "touches"; only horizontal travel matters
_TOUCH_X = PLAYER_START_X
_TOUCH_Y = PLAYER_START_Y


class NeonRunnerEnv(gym.Env):
    """
    Neon Runner Gymnasium environment (vector observations).
    - Simulation at 60 Hz, fixed step.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - Actions: 0 NOOP, 1 TAP (jump), 2 SWIPE (dash), 3 HOLD (press / keep pressing).
      Any action other than HOLD first releases an open press, which is how a
      charge gets released.
    - Reward: meters gained during the step, -1 on death.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        if frame_skip < 1:
            raise ValueError("frame_skip must be >= 1")
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.sim_fps = FPS
        self.dt = 1.0 / self.sim_fps

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(4)
        low, high = obs_bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        self.session: Optional[RunSession] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # With a seed the level is strictly reproducible; without one the session randomizes.
        self.session = RunSession(seed=int(seed) if seed is not None else None)
        self.session.start(0.0)
        self.timestep = 0
        self.current_seed = self.session.seed

        obs = self._get_obs()
        info = {"seed": self.current_seed, "score": 0, "distance_px": 0.0}
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "call reset() first"
        s = self.session
        score_before = s.score

        self._apply_action(int(action))

        for _ in range(self.frame_skip):
            if not s.advance(self.dt):
                break

        terminated = s.phase is GamePhase.GAME_OVER
        reward = -1.0 if terminated else float(s.score - score_before)

        self.timestep += 1
        truncated = (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions)

        obs = self._get_obs()
        info = {
            "score": s.score,
            "distance_px": s.world.max_distance,
            "timestep": self.timestep,
            "seed": self.current_seed,
            "state": s.player.state_tag,
            "grounded": s.player.grounded,
            "death_cause": s.death_cause,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, bool(truncated), info

    # -------------------- Helpers --------------------

    def _apply_action(self, action: int):
        s = self.session
        if action != HOLD and s.input.state.is_down:
            s.pointer_up(_TOUCH_X)
        if action == TAP:
            s.pointer_down(_TOUCH_X, _TOUCH_Y)
            s.pointer_up(_TOUCH_X)
        elif action == SWIPE:
            s.pointer_down(_TOUCH_X, _TOUCH_Y)
            s.pointer_move(_TOUCH_X + SWIPE_MIN_DIST)
            s.pointer_up(_TOUCH_X + SWIPE_MIN_DIST)
        elif action == HOLD and not s.input.state.is_down:
            s.pointer_down(_TOUCH_X, _TOUCH_Y)

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session.player, self.session.world.platforms)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Neon Runner — Gym Env")
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.clock = pygame.time.Clock()
            self.font = pygame.font.SysFont("jetbrainsmono", 16)

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        draw_scene(self.screen, self.session.scene(), self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata.get("render_fps", 60))
            return None

        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
