# neonrunner/tests/obs_unit.py
"""
Usage (from repo root):
  python -m neonrunner.tests.obs_unit
"""
import random

import numpy as np
from pygame.math import Vector2

from neonrunner.env.observations import build_observation, obs_bounds, OBS_SIZE, N_AHEAD, AHEAD_START
from neonrunner.game.config import WIDTH
from neonrunner.game.level import Platform, LevelGen, start_platform
from neonrunner.game.player import Player, Charging, STATE_TAGS

HEAD = 8
AHEAD = AHEAD_START


def _in_bounds(obs: np.ndarray) -> bool:
    low, high = obs_bounds()
    return bool(np.all(obs >= low) and np.all(obs <= high))


def test_shape_dtype_and_bounds_on_start():
    player = Player()
    obs = build_observation(player, [start_platform()])
    assert isinstance(obs, np.ndarray) and obs.dtype == np.float32
    assert obs.shape == (OBS_SIZE,) == (22,)
    assert _in_bounds(obs)
    # one-hot: running
    assert obs[HEAD:AHEAD].sum() == 1.0
    assert obs[HEAD + STATE_TAGS.index("run")] == 1.0


def test_look_ahead_describes_upcoming_platforms():
    plats = [start_platform(), Platform(x=1100.0, y=300.0, width=200.0, has_charge_zone=False),
             Platform(x=1400.0, y=350.0, width=200.0, has_charge_zone=True,
                      charge_zone_offset=20.0, charge_zone_width=100.0)]
    player = Player(pos=Vector2(450.0, 370.0), grounded=True)
    obs = build_observation(player, plats)
    first, second, third = (obs[AHEAD + 3 * i: AHEAD + 3 * i + 3] for i in range(N_AHEAD))
    assert first[0] == 0.0 and first[1] == 0.0 and first[2] == 1.0     # standing on it
    assert abs(second[0] - (1100.0 - 480.0) / WIDTH) < 1e-6
    assert second[1] < 0.0 and second[2] == 0.0                         # higher, no zone
    assert third[0] == 1.0 or third[0] > second[0]
    assert third[2] == 1.0
    assert obs[7] == 1.0                                                # in the charge zone


def test_missing_platforms_use_sentinel():
    player = Player(pos=Vector2(5000.0, 100.0))
    obs = build_observation(player, [start_platform()])
    for i in range(N_AHEAD):
        assert list(obs[AHEAD + 3 * i: AHEAD + 3 * i + 3]) == [1.0, 0.0, 0.0]


def test_charge_fields_follow_state():
    player = Player(pos=Vector2(450.0, 370.0), grounded=True)
    player.state = Charging(sweet_spot=(0.3, 0.45), amount=0.6)
    obs = build_observation(player, [start_platform()])
    assert abs(obs[4] - 0.6) < 1e-6
    assert abs(obs[5] - 0.3) < 1e-6 and abs(obs[6] - 0.45) < 1e-6
    assert obs[HEAD + STATE_TAGS.index("charge")] == 1.0


def test_random_states_stay_in_bounds():
    rng = random.Random(0)
    gen = LevelGen(3)
    gen.update_and_generate(0.0, 0, 350.0)
    for _ in range(300):
        player = Player(pos=Vector2(rng.uniform(-100, 2500), rng.uniform(-400, 900)),
                        vel=Vector2(0.0, rng.uniform(-5000, 5000)),
                        grounded=rng.random() < 0.5)
        obs = build_observation(player, gen.platforms)
        assert _in_bounds(obs)
        assert obs[HEAD:AHEAD].sum() == 1.0


def main():
    for name, fn in list(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 obs_unit passed")


if __name__ == "__main__":
    main()
