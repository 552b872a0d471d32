# neonrunner/tests/camera_unit.py
"""
Usage (from repo root):
  python -m neonrunner.tests.camera_unit
"""
from __future__ import annotations
import random

from neonrunner.game.camera import Camera
from neonrunner.game.config import WIDTH, CAMERA_LEAD


def test_camera_never_moves_left():
    rng = random.Random(2)
    cam = Camera()
    player_x = 100.0
    last = cam.x
    for _ in range(2000):
        player_x += rng.uniform(-80.0, 120.0)
        cam.update(player_x, rng.uniform(0.0, 0.1))
        assert cam.x >= last
        last = cam.x


def test_camera_never_overshoots_target():
    cam = Camera()
    cam.update(1000.0, dt=1.0)
    assert cam.x == 1000.0 - WIDTH * CAMERA_LEAD


def test_camera_eases_proportionally():
    cam = Camera()
    target_player = 1000.0 + WIDTH * CAMERA_LEAD
    cam.update(target_player, dt=0.01)
    assert abs(cam.x - 100.0) < 1e-9
    assert cam.to_screen(150.0) == 150.0 - cam.x


def test_camera_holds_when_player_is_left_of_target():
    cam = Camera(x=500.0)
    cam.update(100.0, dt=0.1)
    assert cam.x == 500.0


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 camera_unit passed")


if __name__ == "__main__":
    main()
