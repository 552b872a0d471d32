"""
Replay tool for NeonRunnerEnv: quick command cheat sheet

# Typical usage (run from REPO ROOT so `neonrunner/...` imports work)

# Replay a HEURISTIC episode by seed (uses actions at experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 105

# Replay a RANDOM episode by seed
python -m experiments.replay --policy random --seed 112

# Replay by pointing directly to a specific actions file (bypasses --policy/--seed lookup)
python -m experiments.replay --trace experiments/runs/traces/heuristic/105_actions.npy --frame-skip 4

# Slow the display to ~decision rate (~15 fps) for readability
python -m experiments.replay --policy heuristic --seed 105 --slow


# Arguments
--policy {random,heuristic,rl}   # which trace subfolder to use (ignored if --trace is provided)
--seed INT                       # episode seed to locate the trace (required unless --trace)
--trace PATH                     # explicit path to a 1D *_actions.npy file
--out-dir PATH                   # base folder containing runs/ (default: experiments/runs)
--frame-skip INT                 # sim frames per decision; default 4
--slow                           # limit display to ~15 fps for readability

# Controls during replay
SPACE = pause/resume
N     = single step (when paused)
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same seed, frame_skip, and action sequence, replay matches the recorded run.
- If you pass --trace, the script does not read meta; supply --frame-skip if different from 4.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, List

import numpy as np
import pygame

from neonrunner.env.nr_env import NeonRunnerEnv, ACTION_NAMES
from neonrunner.env.observations import N_AHEAD, AHEAD_START
from neonrunner.game.config import HEIGHT

DEFAULT_OUT_DIR = "experiments/runs"


def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p


def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta


def _draw_overlay(env: NeonRunnerEnv, font: pygame.font.Font, step_idx: int, action: Optional[int]):
    """Debug panel over the env's frame: action, distance, and the look-ahead slots."""
    surf = pygame.display.get_surface()
    if surf is None or env.session is None:
        return
    s = env.session
    obs = env._get_obs()

    lines: List[str] = []
    lines.append(f"Step={step_idx}  Action={ACTION_NAMES[action] if action is not None else '-'}")
    lines.append(f"Dist={s.world.max_distance:.1f}px  State={s.player.state_tag}  Cause={s.death_cause or '-'}")
    lines.append(f"y={obs[0]:.2f}  vy={obs[1]:.2f}  grounded={int(obs[2])}  zone={int(obs[7])}")
    if s.player.is_charging:
        lines.append(f"charge={obs[4]:.2f}  sweet=[{obs[5]:.2f}, {obs[6]:.2f}]")
    for i in range(N_AHEAD):
        b = AHEAD_START + 3 * i
        dx, dy, zone = obs[b:b + 3]
        lines.append(f"#{i + 1}: dx={dx:.2f} dy={dy:+.2f} zone={int(zone)}")

    # Platform leading-edge guides for the look-ahead slots
    for p in s.world.platforms:
        x = int(p.x - s.world.camera.x)
        pygame.draw.line(surf, (90, 180, 255), (x, 0), (x, HEIGHT), 1)

    # Translucent background
    panel_w = 380
    panel_h = 20 * (len(lines) + 1)
    panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 160))
    surf.blit(panel, (12, 12))

    y0 = 18
    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, (210, 230, 255)), (20, y0 + i * 20))

    pygame.display.flip()


def replay_episode(seed: int, actions: np.ndarray, frame_skip: int, slow: bool = False):
    """
    Replays an episode deterministically with on-screen overlay.
    Controls:
      SPACE: pause/resume   N: single-step when paused
      R: restart episode    ESC: quit
    """
    env = NeonRunnerEnv(render_mode="human", frame_skip=frame_skip)
    env.reset(seed=seed)
    env.render()
    font = pygame.font.SysFont("jetbrainsmono", 16)

    paused = False
    single = False
    step_idx = 0
    action: Optional[int] = None
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_n and paused:
                        single = True
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        action = None
                        paused = False

            if paused and not single:
                env.render()
                _draw_overlay(env, font, step_idx, action=None)
                clock.tick(60)
                continue
            single = False

            action = int(actions[step_idx])
            _, _, term, trunc, _ = env.step(action)

            env.render()
            _draw_overlay(env, font, step_idx, action)
            step_idx += 1

            # Optional slow mode: cap to ~15 fps (decision rate) for readability
            clock.tick(15 if slow else 60)

            if term or trunc:
                # Final frame is already drawn; wait a moment
                pygame.time.delay(600)
                break
    finally:
        env.close()


def main():
    ap = argparse.ArgumentParser(description="Replay a recorded NeonRunnerEnv episode with overlay.")
    ap.add_argument("--seed", type=int, help="Episode seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic / rl")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    ap.add_argument("--slow", action="store_true", help="Slow display (~15 fps) for readability")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)

    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        # Trace files are named <seed>_actions.npy
        if args.seed is None:
            stem = trace_path.stem.split("_")[0]
            if not stem.isdigit():
                raise SystemExit(f"Cannot infer seed from {trace_path.name}; pass --seed")
            args.seed = int(stem)
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip
    if fs < 0:
        fs = 4
        if not args.trace:
            meta = _read_meta(out_dir, args.policy, args.seed)
            if meta.get("frame_skip", "").isdigit():
                fs = int(meta["frame_skip"])

    print(f"Replaying seed={args.seed}  policy={args.policy}  steps={len(actions)}  frame_skip={fs}")
    print("Controls: SPACE pause/resume | N step (when paused) | R restart | ESC quit")

    replay_episode(seed=args.seed, actions=actions, frame_skip=fs, slow=args.slow)


if __name__ == "__main__":
    main()
