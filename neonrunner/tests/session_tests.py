# neonrunner/tests/session_tests.py
"""
Run-level checks for RunSession: lifecycle, game over, charge scenarios,
monotonic score/camera, determinism.

Usage (from repo root):
  python -m neonrunner.tests.session_tests
"""
from __future__ import annotations
import math
import random
import tempfile
from pathlib import Path
from typing import List

from neonrunner.game.config import HEIGHT, WIDTH, QTE_MAX_HOLD_TIME, SCORE_SCALE
from neonrunner.game.input import NoGesture, ReleaseChargeGesture
from neonrunner.game.leaderboard import Leaderboard
from neonrunner.game.player import Running, Dashing, Charging, SuperDashing, AutoLanding
from neonrunner.game.session import RunSession, GamePhase

MOTION_STATES = (Running, Dashing, Charging, SuperDashing, AutoLanding)
DT = 1.0 / 60.0


def _stand_in_zone(s: RunSession):
    """Put the player at rest inside the opening platform's charge zone (x 400..600)."""
    s.player.pos.update(450.0, 370.0)
    s.player.vel.update(0.0, 0.0)
    s.player.grounded = True


def _start_charge(s: RunSession, dt: float):
    _stand_in_zone(s)
    s.pointer_down(450.0, 300.0)
    for _ in range(10):
        s.advance(dt)
        if s.player.is_charging:
            return
    raise AssertionError("hold never turned into a charge")


def test_fall_ends_run_once_and_freezes_score():
    s = RunSession(seed=7)
    scores: List[int] = []
    overs: List[int] = []
    s.on_score(scores.append)
    s.on_game_over(overs.append)
    handle = s.start()
    s.advance(DT)
    assert scores == [1]

    s.player.pos.y = HEIGHT + 50.0       # below every platform
    frames = 0
    while s.advance(DT):
        frames += 1
        assert frames < 120
    assert overs == [1]
    assert s.phase is GamePhase.GAME_OVER
    assert s.death_cause == "fall"
    assert not handle.active and not s.running
    assert s.final_score == scores[-1]

    x = s.player.pos.x
    for _ in range(10):
        assert not s.advance(DT)
        assert not s.tick(100.0)
    assert overs == [1]
    assert s.player.pos.x == x
    assert s.score == scores[-1]
    s.pointer_down(0, 0)
    assert not s.input.state.is_down


def test_falling_behind_camera_ends_run():
    s = RunSession(seed=3)
    s.start()
    s.world.camera.x = 1000.0
    assert not s.advance(DT)
    assert s.death_cause == "behind"


def test_max_hold_cancels_without_super_dash():
    s = RunSession(seed=21)
    s.start()
    dt = 0.0625   # exact in binary; 48 charging frames == QTE_MAX_HOLD_TIME
    _start_charge(s, dt)
    s.player.state.sweet_spot = (0.0, 1.0)   # any charge level would be a hit
    for _ in range(int(QTE_MAX_HOLD_TIME / dt) - 1):
        s.advance(dt)
        assert s.player.is_charging
    s.advance(dt)
    assert s.last_report.overheated
    assert not s.player.is_charging
    assert s.input.state.charge_spent

    # keep holding: the same press must not start another charge
    for _ in range(20):
        s.advance(dt)
        assert not s.player.is_charging
        assert not s.player.is_super_dashing
    g = s.pointer_up(450.0)
    assert isinstance(g, NoGesture)
    for _ in range(30):
        if not s.advance(dt):
            break
        assert not s.player.is_super_dashing


def test_release_in_sweet_spot_super_dashes_and_lands_on_platform():
    s = RunSession(seed=8)
    s.start()
    _start_charge(s, DT)
    s.player.state.sweet_spot = (0.0, 1.0)
    s.advance(DT)
    s.advance(DT)
    g = s.pointer_up(450.0)
    assert isinstance(g, ReleaseChargeGesture)
    s.advance(DT)
    assert s.player.is_super_dashing

    landing = None
    for _ in range(300):
        assert s.advance(DT), "died during super dash"
        if isinstance(s.player.state, AutoLanding):
            landing = s.player.state
        elif landing is not None:
            break
    assert landing is not None
    assert isinstance(s.player.state, Running)
    assert s.player.pos.y + s.player.height == landing.platform.y
    assert s.player.grounded


def test_score_camera_monotonic_and_one_state_per_frame():
    s = RunSession(seed=1)
    s.start()
    rng = random.Random(1)
    last_cam, last_score = s.world.camera.x, s.score
    for frame in range(3000):
        r = rng.random()
        if not s.input.state.is_down and r < 0.03:
            s.pointer_down(200.0, 200.0)
        elif s.input.state.is_down and r < 0.08:
            s.pointer_up(200.0 + rng.choice([0.0, 80.0]))
        if not s.advance(DT):
            break
        assert sum(isinstance(s.player.state, k) for k in MOTION_STATES) == 1
        assert s.world.camera.x >= last_cam
        assert s.score >= last_score
        assert s.score == math.floor(s.world.max_distance / SCORE_SCALE)
        assert 0.0 <= s.player.charge_amount <= 1.0
        last_cam, last_score = s.world.camera.x, s.score


def test_tick_clamps_large_gaps():
    s = RunSession(seed=2)
    s.start(now=10.0)
    s.tick(15.0)
    assert abs(s.player.pos.x - (100.0 + 350.0 * 0.1)) < 1e-9
    x = s.player.pos.x
    s.tick(14.0)        # clock went backwards: no movement
    assert s.player.pos.x == x


def test_menu_and_restart_release_handles():
    s = RunSession(seed=4)
    assert not s.advance(DT)            # nothing before start
    first = s.start()
    s.advance(DT)
    s.return_to_menu()
    assert not first.active
    assert s.phase is GamePhase.MENU
    assert s.scene() is None
    assert not s.advance(DT)

    second = s.start()
    assert second.active and second is not first
    assert s.player.pos.x == 100.0 and s.score == 0
    third = s.start()
    assert not second.active and third.active


def test_same_seed_same_run():
    def run(seed: int):
        s = RunSession(seed=seed)
        s.start()
        trace = []
        for i in range(600):
            if i % 45 == 0:
                s.pointer_down(100.0, 100.0)
            if i % 45 == 3:
                s.pointer_up(100.0)
            if not s.advance(DT):
                break
            trace.append((s.player.pos.x, s.player.pos.y, s.player.state_tag, s.world.camera.x))
        return trace, list(s.world.platforms)

    assert run(77) == run(77)


def test_scene_snapshot_reports_charge():
    s = RunSession(seed=5)
    s.start()
    s.advance(DT)
    scene = s.scene()
    assert scene.phase == "playing" and scene.charge is None
    assert scene.platforms[0].zone is not None
    _start_charge(s, DT)
    s.advance(DT)
    scene = s.scene()
    assert scene.player_tag == "charge"
    assert scene.charge is not None
    assert scene.charge.sweet_spot == s.player.sweet_spot
    assert 0.0 <= scene.charge.fill <= 1.0
    assert 0.0 < scene.charge.time_fraction <= 1.0


def test_start_builds_look_ahead_before_first_frame():
    s = RunSession(seed=9)
    s.start()
    scene = s.scene()
    assert len(scene.platforms) > 1
    x, _, w, _ = scene.platforms[-1].rect
    assert x + w >= 2 * WIDTH
    assert s.player.rng is s.rng


def test_game_over_submits_to_leaderboard():
    with tempfile.TemporaryDirectory() as tmp:
        board = Leaderboard(Path(tmp) / "scores.json")
        s = RunSession(seed=6, leaderboard=board)
        s.start()
        s.advance(DT)
        s.player.pos.y = HEIGHT + 150.0
        s.advance(DT)
        assert s.phase is GamePhase.GAME_OVER
        assert s.last_rank == 1
        assert [e.distance for e in board.load()] == [s.final_score]


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 session_tests passed")


if __name__ == "__main__":
    main()
