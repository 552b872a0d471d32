# neonrunner/game/player.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import ClassVar, Iterable, List, Sequence, Tuple, Union
import pygame
from pygame.math import Vector2
from .config import (
    PLAYER_START_X, PLAYER_START_Y, PLAYER_SIZE, HEIGHT,
    GRAVITY, JUMP_FORCE, LANDING_TOLERANCE, DEATH_MARGIN,
    MIN_SPEED, MAX_SPEED, SPEED_SCALE,
    DASH_SPEED_MULT, DASH_DURATION,
    QTE_CYCLE_DURATION, QTE_SWEET_SPOT_WIDTH, QTE_SWEET_SPOT_LO, QTE_SWEET_SPOT_HI, QTE_MAX_HOLD_TIME,
    SUPER_DASH_SPEED_MULT, SUPER_DASH_SPEED_Y, SUPER_DASH_DURATION,
    AUTO_LAND_DURATION, AHEAD_MARGIN, LAND_INSET,
    CHARGE_ZONE_SNAP, TRAIL_DECAY, SEED_DEFAULT,
)
from .input import Gesture, ReleaseChargeGesture, SwipeGesture, TapGesture
from .level import Platform

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Motion states. Exactly one is held by Player.state at any time.
# ---------------------------------------------------------------------------

@dataclass
class Running:
    tag: ClassVar[str] = "run"


@dataclass
class Dashing:
    timer: float = DASH_DURATION
    tag: ClassVar[str] = "dash"


@dataclass
class Charging:
    sweet_spot: Tuple[float, float]
    amount: float = 0.0
    direction: int = 1
    elapsed: float = 0.0          # simulated seconds since the charge began
    tag: ClassVar[str] = "charge"


@dataclass
class SuperDashing:
    timer: float = SUPER_DASH_DURATION
    tag: ClassVar[str] = "super"


@dataclass
class AutoLanding:
    platform: Platform
    target: Vector2
    start: Vector2
    timer: float = 0.0
    tag: ClassVar[str] = "land"


MotionState = Union[Running, Dashing, Charging, SuperDashing, AutoLanding]
STATE_TAGS = (Running.tag, Dashing.tag, Charging.tag, SuperDashing.tag, AutoLanding.tag)


@dataclass
class TrailEntry:
    x: float
    y: float
    alpha: float
    tag: str


@dataclass
class StepReport:
    """What happened during one Player.step, for the orchestrator and logs."""
    jumped: bool = False
    dash_started: bool = False
    charge_started: bool = False
    overheated: bool = False
    super_dash: bool = False
    auto_land_started: bool = False
    touched_down: bool = False


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def speed_for_score(score: int) -> float:
    return min(MIN_SPEED + score * SPEED_SCALE, MAX_SPEED)


def pick_sweet_spot(rng: random.Random) -> Tuple[float, float]:
    lo = QTE_SWEET_SPOT_LO + rng.random() * (QTE_SWEET_SPOT_HI - QTE_SWEET_SPOT_WIDTH - QTE_SWEET_SPOT_LO)
    return lo, lo + QTE_SWEET_SPOT_WIDTH


def sweet_spot_hit(amount: float, sweet_spot: Tuple[float, float]) -> bool:
    lo, hi = sweet_spot
    return lo <= amount <= hi


def advance_charge(amount: float, direction: int, delta: float) -> Tuple[float, int]:
    """
    Ping-pong `amount` by `delta` in `direction`, reflecting off 0 and 1.
    Works for any delta, including more than a full cycle.
    """
    pos = amount + delta * direction
    while pos > 1.0 or pos < 0.0:
        if pos > 1.0:
            pos = 2.0 - pos
            direction = -1
        else:
            pos = -pos
            direction = 1
    if pos >= 1.0:
        direction = -1
    elif pos <= 0.0:
        direction = 1
    return pos, direction


def ease_out_cubic(t: float) -> float:
    return 1.0 - (1.0 - t) ** 3


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------

@dataclass
class Player:
    """
    Auto-running box. `pos` is the top-left corner in world space.

    Transitions are gated by the current state; per step the precedence is
    AutoLanding > SuperDashing > Charging (hold) > Dashing > Running.
    Landing resolution only runs while Running or Dashing.
    """
    pos: Vector2 = field(default_factory=lambda: Vector2(PLAYER_START_X, PLAYER_START_Y))
    vel: Vector2 = field(default_factory=lambda: Vector2(0.0, 0.0))
    width: float = PLAYER_SIZE
    height: float = PLAYER_SIZE
    grounded: bool = False
    current_speed: float = MIN_SPEED
    state: MotionState = field(default_factory=Running)
    trail: List[TrailEntry] = field(default_factory=list)
    # sweet-spot placement; the run session hands in its own seeded generator
    rng: random.Random = field(default_factory=lambda: random.Random(SEED_DEFAULT), repr=False, compare=False)

    # --- read-only views used by scene / observations ---

    @property
    def state_tag(self) -> str:
        return self.state.tag

    @property
    def is_dashing(self) -> bool:
        return isinstance(self.state, Dashing)

    @property
    def is_charging(self) -> bool:
        return isinstance(self.state, Charging)

    @property
    def is_super_dashing(self) -> bool:
        return isinstance(self.state, SuperDashing)

    @property
    def is_auto_landing(self) -> bool:
        return isinstance(self.state, AutoLanding)

    @property
    def charge_amount(self) -> float:
        return self.state.amount if isinstance(self.state, Charging) else 0.0

    @property
    def sweet_spot(self) -> Tuple[float, float] | None:
        return self.state.sweet_spot if isinstance(self.state, Charging) else None

    @property
    def bottom(self) -> float:
        return self.pos.y + self.height

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.pos.x), int(self.pos.y), int(self.width), int(self.height))

    def overlaps(self, p: Platform) -> bool:
        return (self.pos.x < p.x + p.width and self.pos.x + self.width > p.x and
                self.pos.y < p.y + p.height and self.pos.y + self.height > p.y)

    # --- charge zone ---

    def in_charge_zone(self, platforms: Iterable[Platform]) -> bool:
        if not self.grounded:
            return False
        cx = self.pos.x + self.width / 2
        for p in platforms:
            span = p.zone_span()
            if span is None:
                continue
            if span[0] <= cx <= span[1] and abs(self.bottom - p.y) < CHARGE_ZONE_SNAP:
                return True
        return False

    def can_charge(self, platforms: Iterable[Platform]) -> bool:
        if isinstance(self.state, (SuperDashing, AutoLanding)):
            return False
        return self.in_charge_zone(platforms)

    def is_dead(self, camera_x: float) -> bool:
        return self.pos.y > HEIGHT + DEATH_MARGIN or self.pos.x + self.width < camera_x

    # --- stepping ---

    def apply_gesture(self, gesture: Gesture, report: StepReport):
        if isinstance(gesture, ReleaseChargeGesture):
            if not isinstance(self.state, Charging):
                return
            if sweet_spot_hit(gesture.amount, self.state.sweet_spot):
                self.state = SuperDashing()
                self.grounded = False
                report.super_dash = True
                logger.debug("super dash at charge %.3f", gesture.amount)
            else:
                self.state = Running()
                logger.debug("charge released outside sweet spot (%.3f)", gesture.amount)
        elif isinstance(gesture, SwipeGesture):
            if isinstance(self.state, Running):
                self.state = Dashing()
                report.dash_started = True
        elif isinstance(gesture, TapGesture):
            if self.grounded and isinstance(self.state, (Running, Dashing)):
                self.vel.y = JUMP_FORCE
                self.grounded = False
                report.jumped = True

    def step(self, dt: float, platforms: Sequence[Platform], gestures: Iterable[Gesture] = (),
             holding: bool = False, score: int = 0, rng: random.Random | None = None) -> StepReport:
        """Advance one simulation step of `dt` seconds. `rng` overrides the player's own generator."""
        report = StepReport()
        self.current_speed = speed_for_score(score)
        for g in gestures:
            self.apply_gesture(g, report)

        prev = Vector2(self.pos)
        prev_bottom = self.bottom

        if isinstance(self.state, AutoLanding):
            self._step_auto_landing(dt, report)
        elif isinstance(self.state, SuperDashing):
            self._step_super_dash(dt, platforms, report)
        elif holding:
            self._step_charging(dt, rng or self.rng, report)
        else:
            if isinstance(self.state, Charging):
                # hold dropped without a release gesture
                self.state = Running()
            self._step_run(dt)

        if isinstance(self.state, (Running, Dashing)) and not report.touched_down:
            self._resolve_landing(prev_bottom, platforms)

        self._update_trail(dt, moved=(self.pos != prev))
        return report

    def _step_run(self, dt: float):
        dashing = isinstance(self.state, Dashing)
        if dashing:
            self.vel.x = self.current_speed * DASH_SPEED_MULT
            self.vel.y = 0.0
            self.state.timer -= dt
            if self.state.timer <= 0.0:
                self.state = Running()
        else:
            self.vel.x = self.current_speed

        self.pos.x += self.vel.x * dt
        if not isinstance(self.state, Dashing):
            self.vel.y += GRAVITY * dt
        self.pos.y += self.vel.y * dt

    def _step_charging(self, dt: float, rng: random.Random, report: StepReport):
        if not isinstance(self.state, Charging):
            self.state = Charging(sweet_spot=pick_sweet_spot(rng))
            self.vel.update(0.0, 0.0)
            report.charge_started = True
            return

        c = self.state
        c.elapsed += dt
        if c.elapsed >= QTE_MAX_HOLD_TIME:
            self.state = Running()
            report.overheated = True
            logger.debug("charge overheated after %.2fs", c.elapsed)
            return
        self.vel.update(0.0, 0.0)
        c.amount, c.direction = advance_charge(c.amount, c.direction, dt / QTE_CYCLE_DURATION)

    def _step_super_dash(self, dt: float, platforms: Sequence[Platform], report: StepReport):
        self.vel.update(self.current_speed * SUPER_DASH_SPEED_MULT, SUPER_DASH_SPEED_Y)
        self.pos += self.vel * dt
        self.state.timer -= dt
        if self.state.timer > 0.0:
            return

        ahead = [p for p in platforms if p.x > self.pos.x + AHEAD_MARGIN]
        if not ahead:
            self.state = Running()
            self.vel.x = self.current_speed
            return
        target = min(ahead, key=lambda p: p.x)
        self.state = AutoLanding(
            platform=target,
            target=Vector2(target.x + LAND_INSET, target.y - self.height),
            start=Vector2(self.pos),
        )
        report.auto_land_started = True

    def _step_auto_landing(self, dt: float, report: StepReport):
        a = self.state
        a.timer += dt
        t = min(a.timer / AUTO_LAND_DURATION, 1.0)
        new_pos = a.start.lerp(a.target, ease_out_cubic(t))
        if dt > 0.0:
            self.vel = (new_pos - self.pos) / dt
        self.pos = new_pos
        if t >= 1.0:
            self.pos = Vector2(a.target)
            self.vel.update(0.0, 0.0)
            self.grounded = True
            self.state = Running()
            report.touched_down = True

    def _resolve_landing(self, prev_bottom: float, platforms: Sequence[Platform]):
        """
        Landing-only resolution: snap onto a top surface when descending and
        the bottom edge was above that surface (within tolerance) before the
        move. Contacts from the side are not resolved.

        Resting flush on a top (bottom == top) keeps the player grounded but
        is not a landing, so a dash along the floor keeps going.
        """
        self.grounded = False
        for p in platforms:
            if not (self.pos.x < p.right and self.pos.x + self.width > p.x and
                    self.pos.y < p.y + p.height and self.bottom >= p.y):
                continue
            if self.vel.y < 0.0 or prev_bottom > p.y + LANDING_TOLERANCE:
                continue
            self.grounded = True
            if self.bottom == p.y:
                continue
            self.pos.y = p.y - self.height
            self.vel.y = 0.0
            if isinstance(self.state, Dashing):
                self.state = Running()

    def _update_trail(self, dt: float, moved: bool):
        if moved:
            self.trail.append(TrailEntry(self.pos.x, self.pos.y, 1.0, self.state_tag))
        for e in self.trail:
            e.alpha -= dt * TRAIL_DECAY
        self.trail = [e for e in self.trail if e.alpha > 0.0]
