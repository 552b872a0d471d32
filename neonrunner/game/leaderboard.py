# neonrunner/game/leaderboard.py
from __future__ import annotations
import datetime
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

from .config import LEADERBOARD_SIZE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreEntry:
    distance: int
    date: str   # ISO date


def _parse(raw) -> List[ScoreEntry]:
    if not isinstance(raw, list):
        raise ValueError("leaderboard must be a list")
    entries = []
    for item in raw:
        if not isinstance(item, dict):
            raise ValueError(f"bad entry {item!r}")
        entries.append(ScoreEntry(distance=int(item["distance"]), date=str(item["date"])))
    return entries


class Leaderboard:
    """
    Top-N distances persisted as a JSON list of {"distance", "date"} records.
    Anything unreadable on disk counts as an empty history.
    """
    def __init__(self, path: str | Path, capacity: int = LEADERBOARD_SIZE):
        self.path = Path(path)
        self.capacity = capacity

    def load(self) -> List[ScoreEntry]:
        if not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            entries = _parse(raw)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning("ignoring unreadable leaderboard %s: %s", self.path, e)
            return []
        entries.sort(key=lambda e: e.distance, reverse=True)
        return entries[:self.capacity]

    def best(self) -> Optional[ScoreEntry]:
        entries = self.load()
        return entries[0] if entries else None

    def submit(self, distance: int, date: str | None = None) -> Optional[int]:
        """Record a finished run. Returns its 1-based rank, or None if it did not place."""
        if date is None:
            date = datetime.date.today().isoformat()
        entry = ScoreEntry(distance=int(distance), date=date)
        entries = self.load()
        entries.append(entry)
        # stable sort: an equal distance recorded earlier keeps the better rank
        entries.sort(key=lambda e: e.distance, reverse=True)
        entries = entries[:self.capacity]
        rank = next((i + 1 for i, e in enumerate(entries) if e is entry), None)
        if rank is None:
            return None
        try:
            self.path.write_text(json.dumps([asdict(e) for e in entries], indent=2), encoding="utf-8")
        except OSError as e:
            logger.warning("could not save leaderboard %s: %s", self.path, e)
        return rank
