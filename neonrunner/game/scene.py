# neonrunner/game/scene.py
"""
Declarative per-frame snapshot handed to the presentation layer.
World-space coordinates; the painter subtracts `camera_x`.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import QTE_MAX_HOLD_TIME
from .player import Charging, Player, sweet_spot_hit
from .level import Platform

RectTuple = Tuple[float, float, float, float]   # x, y, w, h


@dataclass(frozen=True)
class PlatformView:
    rect: RectTuple
    zone: Optional[RectTuple] = None


@dataclass(frozen=True)
class TrailView:
    rect: RectTuple
    alpha: float
    tag: str


@dataclass(frozen=True)
class ChargeView:
    fill: float
    sweet_spot: Tuple[float, float]
    time_left: float             # seconds before overheat
    in_sweet_spot: bool

    @property
    def time_fraction(self) -> float:
        return self.time_left / QTE_MAX_HOLD_TIME


@dataclass(frozen=True)
class Scene:
    camera_x: float
    score: int
    phase: str
    platforms: Tuple[PlatformView, ...]
    player: RectTuple
    player_tag: str
    trail: Tuple[TrailView, ...]
    charge: Optional[ChargeView] = None


def platform_view(p: Platform) -> PlatformView:
    zone = None
    span = p.zone_span()
    if span is not None:
        zone = (span[0], p.y, span[1] - span[0], p.height)
    return PlatformView(rect=(p.x, p.y, p.width, p.height), zone=zone)


def charge_view(player: Player) -> Optional[ChargeView]:
    c = player.state
    if not isinstance(c, Charging):
        return None
    return ChargeView(
        fill=c.amount,
        sweet_spot=c.sweet_spot,
        time_left=max(0.0, QTE_MAX_HOLD_TIME - c.elapsed),
        in_sweet_spot=sweet_spot_hit(c.amount, c.sweet_spot),
    )


def build_scene(player: Player, platforms, camera_x: float, score: int, phase: str) -> Scene:
    return Scene(
        camera_x=camera_x,
        score=score,
        phase=phase,
        platforms=tuple(platform_view(p) for p in platforms),
        player=(player.pos.x, player.pos.y, player.width, player.height),
        player_tag=player.state_tag,
        trail=tuple(TrailView((t.x, t.y, player.width, player.height), t.alpha, t.tag) for t in player.trail),
        charge=charge_view(player),
    )
