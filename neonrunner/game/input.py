# neonrunner/game/input.py
"""
Pointer sampling and gesture classification.

One pointer session at a time. A completed press is classified once, on
release, into a tagged gesture; a press that is still down may assert the
continuous "hold" condition that drives charging.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Union
from .config import TAP_MAX_TIME, HOLD_DELAY, SWIPE_MIN_DIST


@dataclass(frozen=True)
class SwipeGesture:
    pass


@dataclass(frozen=True)
class TapGesture:
    pass


@dataclass(frozen=True)
class ReleaseChargeGesture:
    amount: float


@dataclass(frozen=True)
class NoGesture:
    pass


Gesture = Union[SwipeGesture, TapGesture, ReleaseChargeGesture, NoGesture]
NO_GESTURE = NoGesture()


@dataclass
class InputState:
    is_down: bool = False
    start_x: float = 0.0
    start_y: float = 0.0
    current_x: float = 0.0
    down_time: float = 0.0
    charge_spent: bool = False   # this press already overheated once


def classify_release(dx: float, duration: float, charging: bool, charge_amount: float) -> Gesture:
    """Priority chain: release-charge > swipe > tap > nothing."""
    if charging:
        return ReleaseChargeGesture(charge_amount)
    if dx >= SWIPE_MIN_DIST:
        return SwipeGesture()
    if duration < TAP_MAX_TIME:
        return TapGesture()
    return NO_GESTURE


class InputSampler:
    def __init__(self):
        self.state = InputState()
        self.pending: List[Gesture] = []

    def pointer_down(self, x: float, y: float, t: float):
        self.state = InputState(is_down=True, start_x=x, start_y=y, current_x=x, down_time=t)

    def pointer_move(self, x: float):
        if self.state.is_down:
            self.state.current_x = x

    def pointer_up(self, x: float, t: float, charging: bool = False, charge_amount: float = 0.0) -> Gesture:
        if not self.state.is_down:
            return NO_GESTURE
        dx = x - self.state.start_x
        duration = t - self.state.down_time
        self.state.is_down = False
        gesture = classify_release(dx, duration, charging, charge_amount)
        if not isinstance(gesture, NoGesture):
            self.pending.append(gesture)
        return gesture

    def pointer_cancel(self, t: float, charging: bool = False, charge_amount: float = 0.0) -> Gesture:
        return self.pointer_up(self.state.current_x, t, charging, charge_amount)

    def hold_asserted(self, now: float, player_ready: bool) -> bool:
        s = self.state
        if not s.is_down or s.charge_spent or not player_ready:
            return False
        held = now - s.down_time
        return held > HOLD_DELAY and abs(s.current_x - s.start_x) < SWIPE_MIN_DIST

    def mark_charge_spent(self):
        if self.state.is_down:
            self.state.charge_spent = True

    def drain(self) -> List[Gesture]:
        out, self.pending = self.pending, []
        return out
