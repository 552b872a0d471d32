# neonrunner/env/observations.py
from __future__ import annotations
from typing import List, Sequence, Tuple
import numpy as np

from ..game.config import WIDTH, HEIGHT, MAX_SPEED, JUMP_FORCE
from ..game.level import Platform
from ..game.player import STATE_TAGS

# Number of upcoming platforms described in the observation
N_AHEAD: int = 3
# Max |vy| used for normalization
VY_SCALE: float = abs(JUMP_FORCE) * 2.0

# [y, vy, grounded, speed, charge, sweet_lo, sweet_hi, in_zone] + one-hot(states) + 3 x (dx, dy, zone)
AHEAD_START: int = 8 + len(STATE_TAGS)
OBS_SIZE: int = AHEAD_START + 3 * N_AHEAD


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def _upcoming(platforms: Sequence[Platform], x: float, n: int) -> List[Platform]:
    """First `n` platforms whose trailing edge is still ahead of x, by ascending x."""
    ahead = [p for p in platforms if p.right > x]
    ahead.sort(key=lambda p: p.x)
    return ahead[:n]


def obs_bounds() -> Tuple[np.ndarray, np.ndarray]:
    low = np.array([0.0, -1.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
                   + [0.0] * len(STATE_TAGS)
                   + [0.0, -1.0, 0.0] * N_AHEAD, dtype=np.float32)
    high = np.array([1.0] * 8
                    + [1.0] * len(STATE_TAGS)
                    + [1.0, 1.0, 1.0] * N_AHEAD, dtype=np.float32)
    return low, high


def build_observation(player, platforms: Sequence[Platform]) -> np.ndarray:
    """
    Flat float32 vector describing the player and the next N_AHEAD platforms.
    Platform dx is measured from the player's right edge and scaled by WIDTH
    (0 = overlapping); dy is platform top minus player bottom scaled by HEIGHT.
    Missing platforms are encoded as (1, 0, 0).
    """
    sweet = player.sweet_spot or (0.0, 0.0)
    head = [
        _clamp(player.pos.y / HEIGHT, 0.0, 1.0),
        _clamp(player.vel.y / VY_SCALE, -1.0, 1.0),
        1.0 if player.grounded else 0.0,
        _clamp(player.current_speed / MAX_SPEED, 0.0, 1.0),
        player.charge_amount,
        sweet[0],
        sweet[1],
        1.0 if player.in_charge_zone(platforms) else 0.0,
    ]
    one_hot = [1.0 if player.state_tag == tag else 0.0 for tag in STATE_TAGS]

    ahead: List[float] = []
    front = player.pos.x + player.width
    upcoming = _upcoming(platforms, player.pos.x, N_AHEAD)
    for i in range(N_AHEAD):
        if i < len(upcoming):
            p = upcoming[i]
            dx = _clamp((p.x - front) / WIDTH, 0.0, 1.0)
            dy = _clamp((p.y - player.bottom) / HEIGHT, -1.0, 1.0)
            ahead += [dx, dy, 1.0 if p.has_charge_zone else 0.0]
        else:
            ahead += [1.0, 0.0, 0.0]

    return np.asarray(head + one_hot + ahead, dtype=np.float32)
