# neonrunner/game/renderer.py
from __future__ import annotations
import math
from typing import Tuple
import pygame
from .config import (
    WIDTH, HEIGHT, QTE_WARN_TIME,
    COLOR_BG, COLOR_FG, COLOR_PLAT, COLOR_PLAT_TOP, COLOR_ZONE_BG, COLOR_ZONE_GLOW,
    COLOR_PLAYER, COLOR_PLAYER_DASH, COLOR_PLAYER_SUPER, COLOR_PLAYER_CHARGE,
    COLOR_QTE_BG, COLOR_QTE_SUCCESS, COLOR_QTE_FAIL, COLOR_QTE_MARKER, COLOR_ACCENT,
)
from .scene import Scene, ChargeView

STATE_COLORS = {
    "run": COLOR_PLAYER,
    "dash": COLOR_PLAYER_DASH,
    "charge": COLOR_PLAYER_CHARGE,
    "super": COLOR_PLAYER_SUPER,
    "land": COLOR_PLAYER_SUPER,
}

BAR_W, BAR_H = 140, 16


def _screen_rect(rect, camera_x: float) -> pygame.Rect:
    x, y, w, h = rect
    return pygame.Rect(int(x - camera_x), int(y), int(w), int(h))


def _blit_alpha_rect(surf: pygame.Surface, color: Tuple[int, ...], r: pygame.Rect, alpha: int):
    panel = pygame.Surface((max(1, r.width), max(1, r.height)), pygame.SRCALPHA)
    panel.fill((color[0], color[1], color[2], max(0, min(255, alpha))))
    surf.blit(panel, r.topleft)


def draw_platforms(surf: pygame.Surface, scene: Scene):
    for pv in scene.platforms:
        r = _screen_rect(pv.rect, scene.camera_x)
        if r.right < 0 or r.left > WIDTH:
            continue
        pygame.draw.rect(surf, COLOR_PLAT, r)
        if pv.zone is not None:
            z = _screen_rect(pv.zone, scene.camera_x)
            _blit_alpha_rect(surf, COLOR_ZONE_BG, z, COLOR_ZONE_BG[3])
            pygame.draw.rect(surf, COLOR_ZONE_GLOW, pygame.Rect(z.left, z.top, z.width, 4))
        else:
            pygame.draw.rect(surf, COLOR_PLAT_TOP, pygame.Rect(r.left, r.top, r.width, 4))


def draw_player(surf: pygame.Surface, scene: Scene):
    for t in scene.trail:
        r = _screen_rect(t.rect, scene.camera_x)
        _blit_alpha_rect(surf, STATE_COLORS.get(t.tag, COLOR_PLAYER), r, int(t.alpha * 0.4 * 255))
    color = STATE_COLORS.get(scene.player_tag, COLOR_PLAYER)
    pygame.draw.rect(surf, color, _screen_rect(scene.player, scene.camera_x))


def draw_charge_bar(surf: pygame.Surface, scene: Scene, charge: ChargeView, font: pygame.font.Font):
    px, py, pw, _ = scene.player
    bar = pygame.Rect(int(px - scene.camera_x + pw / 2 - BAR_W / 2), int(py - 60), BAR_W, BAR_H)
    pygame.draw.rect(surf, COLOR_QTE_BG, bar)
    _blit_alpha_rect(surf, (255, 255, 255), pygame.Rect(bar.left, bar.top, int(BAR_W * charge.time_fraction), BAR_H), 13)

    lo, hi = charge.sweet_spot
    pulse = 0.6 + math.sin(pygame.time.get_ticks() * 0.01) * 0.2
    sweet = pygame.Rect(bar.left + int(BAR_W * lo), bar.top, max(1, int(BAR_W * (hi - lo))), BAR_H)
    _blit_alpha_rect(surf, COLOR_QTE_SUCCESS, sweet, int(pulse * 255))

    marker_color = (255, 255, 255) if charge.in_sweet_spot else COLOR_QTE_MARKER
    pygame.draw.rect(surf, marker_color, pygame.Rect(bar.left + int(BAR_W * charge.fill) - 2, bar.top - 4, 4, BAR_H + 8))

    label = font.render("RELEASE TO DASH", True, (255, 255, 255))
    surf.blit(label, (bar.centerx - label.get_width() // 2, bar.top - 10 - label.get_height()))
    if charge.time_left < QTE_WARN_TIME:
        warn = font.render("OVERHEAT IMMINENT!", True, COLOR_QTE_FAIL)
        surf.blit(warn, (bar.centerx - warn.get_width() // 2, bar.bottom + 4))


def draw_hud(surf: pygame.Surface, scene: Scene, font: pygame.font.Font):
    txt = font.render(f"{scene.score}m", True, COLOR_ACCENT)
    surf.blit(txt, (WIDTH - txt.get_width() - 24, 16))


def draw_scene(surf: pygame.Surface, scene: Scene, font: pygame.font.Font):
    """Paint a full frame: background, platforms, trail + player, charge bar, HUD."""
    surf.fill(COLOR_BG)
    draw_platforms(surf, scene)
    draw_player(surf, scene)
    if scene.charge is not None:
        draw_charge_bar(surf, scene, scene.charge, font)
    draw_hud(surf, scene, font)


def draw_panel(surf: pygame.Surface, lines, font: pygame.font.Font, accent=COLOR_FG):
    """Centered translucent text panel for the menu and game-over screens."""
    line_h = font.get_linesize() + 4
    panel_w = max(font.size(l)[0] for l in lines) + 48
    panel_h = line_h * len(lines) + 32
    r = pygame.Rect((WIDTH - panel_w) // 2, (HEIGHT - panel_h) // 2, panel_w, panel_h)
    _blit_alpha_rect(surf, (30, 41, 59), r, 220)
    pygame.draw.rect(surf, accent, r, width=2, border_radius=10)
    y = r.top + 16
    for i, msg in enumerate(lines):
        color = accent if i == 0 else COLOR_FG
        txt = font.render(msg, True, color)
        surf.blit(txt, (r.centerx - txt.get_width() // 2, y))
        y += line_h
