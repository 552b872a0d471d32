# /experiments/sanity_rollout.py
"""
Baseline rollouts for NeonRunnerEnv.

Plays a seeded random policy and a rule-based runner over a fixed seed set,
appends one row per episode to <out-dir>/episodes.csv and, with --save-traces,
stores <out-dir>/traces/<policy>/<seed>_actions.npy (+ _meta.txt, optional
_obs.npy) so `experiments.replay` can reproduce any episode exactly.

  python -m experiments.sanity_rollout --policies both --save-traces
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222 --save-traces --save-obs
"""

from __future__ import annotations
import argparse
import csv
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from neonrunner.env.nr_env import NeonRunnerEnv, NOOP, TAP, SWIPE, HOLD
from neonrunner.env.observations import AHEAD_START

logger = logging.getLogger(__name__)

Policy = Callable[[np.ndarray], int]


# ------------------------ Policies ------------------------

def make_random_policy(seed: int) -> Policy:
    rng = np.random.RandomState(10_000 + seed)
    return lambda _obs: int(rng.randint(0, 4))


def make_heuristic_policy(_seed: int) -> Policy:
    """
    Charge whenever a zone is underfoot and let go inside the sweet spot;
    otherwise jump (or dash across a drop) when the floor is about to end.
    """
    def act(obs: np.ndarray) -> int:
        grounded, charge, lo, hi, in_zone = obs[2] > 0.5, obs[4], obs[5], obs[6], obs[7] > 0.5
        if hi > 0.0:                                   # bar is live
            return NOOP if lo <= charge <= hi else HOLD
        if grounded and in_zone:
            return HOLD
        on_dx = obs[AHEAD_START]
        next_dx, next_dy = obs[AHEAD_START + 3], obs[AHEAD_START + 4]
        if grounded and on_dx == 0.0 and next_dx < 0.12:
            return TAP if next_dy > -0.3 else SWIPE
        return NOOP
    return act


POLICIES: Dict[str, Callable[[int], Policy]] = {
    "random": make_random_policy,
    "heuristic": make_heuristic_policy,
}


# ------------------------ Episodes ------------------------

@dataclass
class EpisodeResult:
    policy: str
    seed: int
    frame_skip: int
    decisions: int
    return_sum: float
    score_m: int
    distance_px: float
    terminated: bool
    truncated: bool
    death_cause: Optional[str]
    grounded_ratio: float


def play_episode(policy_name: str, seed: int, frame_skip: int, max_decisions: int):
    """Run one episode; returns (result, actions, observations)."""
    policy = POLICIES[policy_name](seed)
    env = NeonRunnerEnv(frame_skip=frame_skip)
    actions: List[int] = []
    observations: List[np.ndarray] = []
    total, grounded = 0.0, 0
    term = trunc = False
    try:
        obs, info = env.reset(seed=seed)
        observations.append(obs.copy())
        while len(actions) < max_decisions and not (term or trunc):
            a = policy(obs)
            obs, r, term, trunc, info = env.step(a)
            actions.append(a)
            observations.append(obs.copy())
            total += r
            grounded += bool(info["grounded"])
    finally:
        env.close()

    result = EpisodeResult(
        policy=policy_name,
        seed=seed,
        frame_skip=frame_skip,
        decisions=len(actions),
        return_sum=round(total, 1),
        score_m=int(info["score"]),
        distance_px=round(float(info["distance_px"]), 1),
        terminated=bool(term),
        truncated=bool(trunc),
        death_cause=info.get("death_cause"),
        grounded_ratio=round(grounded / max(1, len(actions)), 3),
    )
    return result, actions, observations


def save_trace(out_dir: Path, result: EpisodeResult, actions: List[int],
               observations: Optional[List[np.ndarray]]):
    trace_dir = out_dir / "traces" / result.policy
    trace_dir.mkdir(parents=True, exist_ok=True)
    np.save(trace_dir / f"{result.seed}_actions.npy", np.asarray(actions, dtype=np.int8))
    if observations is not None:
        np.save(trace_dir / f"{result.seed}_obs.npy", np.stack(observations).astype(np.float32))
    meta = {"seed": result.seed, "frame_skip": result.frame_skip, "policy": result.policy}
    (trace_dir / f"{result.seed}_meta.txt").write_text(
        "\n".join(f"{k}={v}" for k, v in meta.items()), encoding="utf-8")


def append_rows(csv_path: Path, results: List[EpisodeResult]):
    new_file = not csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=[fl.name for fl in fields(EpisodeResult)])
        if new_file:
            w.writeheader()
        for r in results:
            w.writerow(asdict(r))


def main():
    ap = argparse.ArgumentParser(description="Random / heuristic baselines for NeonRunnerEnv.")
    ap.add_argument("--policies", choices=["random", "heuristic", "both"], default="both")
    ap.add_argument("--seeds", type=str, default="", help="Comma-separated; default 101..120")
    ap.add_argument("--frame-skip", type=int, default=4)
    ap.add_argument("--steps", type=int, default=10_000, help="Decision cap per episode")
    ap.add_argument("--out-dir", type=str, default="experiments/runs")
    ap.add_argument("--save-traces", action="store_true")
    ap.add_argument("--save-obs", action="store_true", help="Also store per-step observations")
    args = ap.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    seeds = [int(s) for s in args.seeds.split(",") if s.strip()] or list(range(101, 121))
    names = list(POLICIES) if args.policies == "both" else [args.policies]

    results: List[EpisodeResult] = []
    for name in names:
        for seed in seeds:
            result, actions, observations = play_episode(name, seed, args.frame_skip, args.steps)
            results.append(result)
            if args.save_traces:
                save_trace(out_dir, result, actions, observations if args.save_obs else None)
            print(f"[{name}] seed={seed}  decisions={result.decisions}  score={result.score_m}m  "
                  f"return={result.return_sum}  cause={result.death_cause or '-'}")

    append_rows(out_dir / "episodes.csv", results)
    for name in names:
        scores = [r.score_m for r in results if r.policy == name]
        print(f"{name}: mean {np.mean(scores):.1f}m  best {max(scores)}m over {len(scores)} seeds")
    print(f"✓ wrote {len(results)} episodes to {out_dir / 'episodes.csv'}")


if __name__ == "__main__":
    main()
