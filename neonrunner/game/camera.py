# neonrunner/game/camera.py
from __future__ import annotations
from dataclasses import dataclass
from .config import WIDTH, CAMERA_LEAD, CAMERA_SMOOTHING


@dataclass
class Camera:
    """Horizontal scroll offset. Only ever moves right."""
    x: float = 0.0

    def target_for(self, player_x: float) -> float:
        return player_x - WIDTH * CAMERA_LEAD

    def update(self, player_x: float, dt: float):
        gap = self.target_for(player_x) - self.x
        if gap <= 0.0:
            return
        # exponential smoothing, capped so a long dt cannot overshoot the target
        self.x += min(gap, gap * CAMERA_SMOOTHING * dt)

    def to_screen(self, world_x: float) -> float:
        return world_x - self.x
