# neonrunner/game/session.py
from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .camera import Camera
from .config import MAX_DT, HEIGHT, DEATH_MARGIN, SCORE_SCALE
from .input import Gesture, InputSampler, NO_GESTURE
from .leaderboard import Leaderboard
from .level import LevelGen, Platform
from .player import Player, StepReport
from .scene import Scene, build_scene

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class FrameHandle:
    """Scheduling token for one run's frame loop. Cancelled on every exit path."""
    active: bool = True

    def cancel(self):
        self.active = False


@dataclass
class World:
    level: LevelGen
    camera: Camera = field(default_factory=Camera)
    max_distance: float = 0.0
    score: int = 0

    @property
    def platforms(self) -> List[Platform]:
        return self.level.platforms


class RunSession:
    """
    Owns one run's World + Player and steps them once per frame:
    state machine -> generator -> camera -> death/score -> listeners.

    Two clocks feed it: `tick(now)` for a host display clock (dt derived and
    clamped), `advance(dt)` for fixed-step drivers such as the env and tests.
    """
    def __init__(self, seed: int | None = None, leaderboard: Leaderboard | None = None):
        self.requested_seed = seed
        self.seed: Optional[int] = None
        self.leaderboard = leaderboard
        self.phase = GamePhase.MENU
        self.world: Optional[World] = None
        self.player: Optional[Player] = None
        self.input = InputSampler()
        self.rng: Optional[random.Random] = None
        self.handle: Optional[FrameHandle] = None
        self.clock = 0.0
        self._last_tick = 0.0
        self.frame = 0
        self.final_score: Optional[int] = None
        self.death_cause: Optional[str] = None   # "fall" | "behind" | None
        self.last_rank: Optional[int] = None
        self.last_report = StepReport()
        self._score_listeners: List[Callable[[int], None]] = []
        self._game_over_listeners: List[Callable[[int], None]] = []

    # -------------------- listeners --------------------

    def on_score(self, fn: Callable[[int], None]) -> Callable[[int], None]:
        self._score_listeners.append(fn)
        return fn

    def on_game_over(self, fn: Callable[[int], None]) -> Callable[[int], None]:
        self._game_over_listeners.append(fn)
        return fn

    # -------------------- lifecycle --------------------

    @property
    def running(self) -> bool:
        return self.phase is GamePhase.PLAYING and self.handle is not None and self.handle.active

    @property
    def score(self) -> int:
        return self.world.score if self.world is not None else (self.final_score or 0)

    def start(self, now: float = 0.0) -> FrameHandle:
        """Begin a fresh run. Any previous run's handle is released first."""
        self._release_handle()
        self.seed = self.requested_seed if self.requested_seed is not None else random.randrange(0, 2**32 - 1)
        self.rng = random.Random(self.seed)
        self.world = World(level=LevelGen(self.seed, rng=self.rng))
        self.player = Player(rng=self.rng)
        self.input = InputSampler()
        self.clock = now
        self._last_tick = now
        self.frame = 0
        self.final_score = None
        self.death_cause = None
        self.last_rank = None
        self.last_report = StepReport()
        # look-ahead exists before the first frame so an early scene() is complete
        self.world.level.update_and_generate(self.world.camera.x, 0, self.player.current_speed)
        self.handle = FrameHandle()
        self.phase = GamePhase.PLAYING
        logger.info("run started (seed=%s)", self.seed)
        return self.handle

    def return_to_menu(self):
        self._release_handle()
        self.world = None
        self.player = None
        self.input = InputSampler()
        self.phase = GamePhase.MENU
        logger.info("returned to menu")

    def _release_handle(self):
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

    # -------------------- frame stepping --------------------

    def tick(self, now: float) -> bool:
        """Host-clock frame. Returns False once the loop should stop."""
        if not self.running:
            return False
        dt = min(max(0.0, now - self._last_tick), MAX_DT)
        self._last_tick = now
        self.clock = now
        return self._simulate(dt)

    def advance(self, dt: float) -> bool:
        """Fixed-step frame. Returns False once the loop should stop."""
        if not self.running:
            return False
        dt = min(max(0.0, dt), MAX_DT)
        self.clock += dt
        self._last_tick = self.clock
        return self._simulate(dt)

    def _simulate(self, dt: float) -> bool:
        w, p = self.world, self.player
        gestures = self.input.drain()
        holding = self.input.hold_asserted(self.clock, p.can_charge(w.platforms))
        report = p.step(dt, w.platforms, gestures, holding, w.score)
        self.last_report = report
        if report.overheated:
            self.input.mark_charge_spent()
            logger.info("charge overheated")
        if report.super_dash:
            logger.info("super dash at x=%.0f", p.pos.x)

        w.level.update_and_generate(w.camera.x, w.score, p.current_speed)
        w.camera.update(p.pos.x, dt)

        if p.is_dead(w.camera.x):
            self._end_run()
            return False

        self._update_score()
        self.frame += 1
        return True

    def _update_score(self):
        w, p = self.world, self.player
        if p.pos.x <= w.max_distance:
            return
        w.max_distance = p.pos.x
        score = math.floor(w.max_distance / SCORE_SCALE)
        if score != w.score:
            w.score = score
            for fn in self._score_listeners:
                fn(score)

    def _end_run(self):
        w, p = self.world, self.player
        self.phase = GamePhase.GAME_OVER
        self._release_handle()
        self.final_score = w.score
        self.death_cause = "fall" if p.pos.y > HEIGHT + DEATH_MARGIN else "behind"
        logger.info("game over: %dm (%s)", self.final_score, self.death_cause)
        if self.leaderboard is not None:
            self.last_rank = self.leaderboard.submit(self.final_score)
        for fn in self._game_over_listeners:
            fn(self.final_score)

    # -------------------- pointer stream --------------------

    def pointer_down(self, x: float, y: float, t: float | None = None):
        if not self.running:
            return
        self.input.pointer_down(x, y, self.clock if t is None else t)

    def pointer_move(self, x: float):
        if not self.running:
            return
        self.input.pointer_move(x)

    def pointer_up(self, x: float, t: float | None = None) -> Gesture:
        if not self.running:
            return NO_GESTURE
        p = self.player
        return self.input.pointer_up(x, self.clock if t is None else t, p.is_charging, p.charge_amount)

    def pointer_cancel(self, t: float | None = None) -> Gesture:
        if not self.running:
            return NO_GESTURE
        p = self.player
        return self.input.pointer_cancel(self.clock if t is None else t, p.is_charging, p.charge_amount)

    # -------------------- presentation --------------------

    def scene(self) -> Optional[Scene]:
        if self.world is None or self.player is None:
            return None
        return build_scene(self.player, self.world.platforms, self.world.camera.x,
                           self.world.score, self.phase.value)
