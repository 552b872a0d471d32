# neonrunner/game/level.py
from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple
import pygame
from .config import (
    WIDTH, HEIGHT, GRAVITY, JUMP_FORCE, PLATFORM_HEIGHT,
    START_PLATFORM, START_ZONE, START_PLATFORM_WIDTH, MIN_PLATFORM_WIDTH_TARGET,
    START_GAP, GAP_GROWTH, MAX_GAP_SAFETY_MARGIN, DIFFICULTY_SCORE,
    Y_STEP_BASE, Y_STEP_GROWTH, MIN_Y_FRAC, MAX_Y_FRAC,
    GENERATE_AHEAD_SCREENS, CULL_BEHIND,
    CHARGE_ZONE_CHANCE, CHARGE_ZONE_WIDTH, CHARGE_ZONE_MAX_FRACTION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Platform:
    x: float
    y: float            # top surface
    width: float
    height: float = PLATFORM_HEIGHT
    has_charge_zone: bool = False
    charge_zone_offset: float = 0.0
    charge_zone_width: float = 0.0

    @property
    def right(self) -> float:
        return self.x + self.width

    def zone_span(self) -> Optional[Tuple[float, float]]:
        """World-space [left, right] of the charge zone, or None."""
        if not self.has_charge_zone:
            return None
        left = self.x + self.charge_zone_offset
        return left, left + self.charge_zone_width

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))


def difficulty(score: int) -> float:
    return min(score / DIFFICULTY_SCORE, 1.0)


def jump_airtime() -> float:
    """Time from take-off back to take-off height for a standing jump."""
    return 2.0 * abs(JUMP_FORCE) / GRAVITY


def platform_width(score: int) -> float:
    diff = difficulty(score)
    return START_PLATFORM_WIDTH - diff * (START_PLATFORM_WIDTH - MIN_PLATFORM_WIDTH_TARGET)


def gap_range(score: int, current_speed: float) -> Tuple[float, float]:
    """
    (min_gap, max_gap) for the next platform. max_gap is what the player can
    clear at current_speed, shrunk by the safety margin; if that is below the
    difficulty-driven minimum, the minimum gives way so the range never inverts.
    """
    min_gap = START_GAP + difficulty(score) * GAP_GROWTH
    max_gap = current_speed * jump_airtime() * MAX_GAP_SAFETY_MARGIN
    if max_gap < min_gap:
        min_gap = max_gap
    return min_gap, max_gap


def start_platform() -> Platform:
    x, y, w = START_PLATFORM
    offset, zone_w = START_ZONE
    return Platform(x=x, y=y, width=w, has_charge_zone=True,
                    charge_zone_offset=offset, charge_zone_width=zone_w)


class LevelGen:
    """
    Generates an endless ribbon of platforms ahead of the camera.
    Spacing and width scale with score; every gap is clearable at the
    player's current speed.
    """
    def __init__(self, seed: int | None = None, rng: random.Random | None = None):
        if seed is None:
            seed = random.randrange(0, 2**32 - 1)
        self.seed = seed
        self.rng = rng if rng is not None else random.Random(seed)
        self.platforms: List[Platform] = [start_platform()]

    def _next_platform(self, last: Platform, score: int, current_speed: float) -> Platform:
        diff = difficulty(score)
        w = platform_width(score)
        lo, hi = gap_range(score, current_speed)
        gap = lo + self.rng.random() * (hi - lo)

        max_dy = Y_STEP_BASE + diff * Y_STEP_GROWTH
        y = last.y + (self.rng.random() * max_dy * 2 - max_dy)
        y = max(HEIGHT * MIN_Y_FRAC, min(HEIGHT * MAX_Y_FRAC, y))

        has_zone = self.rng.random() < CHARGE_ZONE_CHANCE
        zone_w = 0.0
        zone_off = 0.0
        if has_zone:
            zone_w = min(CHARGE_ZONE_WIDTH, w * CHARGE_ZONE_MAX_FRACTION)
            zone_off = self.rng.random() * (w - zone_w)

        return Platform(
            x=last.right + gap,
            y=y,
            width=w,
            has_charge_zone=has_zone,
            charge_zone_offset=zone_off,
            charge_zone_width=zone_w,
        )

    def update_and_generate(self, camera_x: float, score: int, current_speed: float):
        """
        Fill the level up to GENERATE_AHEAD_SCREENS widths past the camera,
        then forget platforms that scrolled well behind it.
        """
        horizon = camera_x + WIDTH * GENERATE_AHEAD_SCREENS
        while self.platforms[-1].right < horizon:
            p = self._next_platform(self.platforms[-1], score, current_speed)
            self.platforms.append(p)
            logger.debug("platform x=%.0f y=%.0f w=%.0f zone=%s", p.x, p.y, p.width, p.has_charge_zone)

        self.platforms = [p for p in self.platforms if p.right > camera_x - CULL_BEHIND]
