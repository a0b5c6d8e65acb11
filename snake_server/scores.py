"""Best-score bookkeeping and the stores that persist the leaderboard."""

from __future__ import annotations

from dataclasses import dataclass
import itertools
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol


class ScoreStore(Protocol):
    """Durable home of the leaderboard.

    ``load`` is called once at startup and ``save`` whenever the top entries
    change; nothing else touches the store.
    """

    def load(self) -> List[dict]: ...

    def save(self, entries: List[dict]) -> None: ...


def _clean_rows(rows: object) -> List[dict]:
    if not isinstance(rows, list):
        return []
    cleaned: List[dict] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        name = row.get("name")
        score = row.get("score")
        if not isinstance(name, str) or isinstance(score, bool) or not isinstance(score, int):
            continue
        cleaned.append({"name": name, "score": score})
    return cleaned


class JsonScoreStore:
    """Leaderboard kept in a pretty-printed JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> List[dict]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                rows = json.load(handle)
        except FileNotFoundError:
            return []
        except (OSError, ValueError):
            logging.warning("Could not read high scores from %s, starting empty", self.path)
            return []
        return _clean_rows(rows)

    def save(self, entries: List[dict]) -> None:
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(entries, handle, indent=2)


class MemoryScoreStore:
    """In-process store, handy for tests and throwaway servers."""

    def __init__(self, entries: Optional[List[dict]] = None) -> None:
        self.entries: List[dict] = _clean_rows(entries or [])
        self.saves: int = 0

    def load(self) -> List[dict]:
        return [dict(entry) for entry in self.entries]

    def save(self, entries: List[dict]) -> None:
        self.entries = [dict(entry) for entry in entries]
        self.saves += 1


@dataclass
class ScoreEntry:
    name: str
    score: int
    achieved: int


class ScoreLedger:
    """Per-identity best scores plus the derived top-N leaderboard.

    The ledger is an in-memory cache in front of a :class:`ScoreStore`.
    Ties on score are broken by whichever identity reached it first.
    """

    def __init__(self, store: ScoreStore, size: int) -> None:
        self.store = store
        self.size = size
        self._entries: Dict[str, ScoreEntry] = {}
        self._sequence = itertools.count()
        self._top: List[dict] = []

    def load(self) -> None:
        """Seed the ledger from the store, keeping its order for ties."""

        for row in self.store.load():
            current = self._entries.get(row["name"])
            if current is None:
                self._entries[row["name"]] = ScoreEntry(row["name"], row["score"], next(self._sequence))
            elif row["score"] > current.score:
                current.score = row["score"]
        self._top = self._compute_top()
        logging.info("Loaded %d high score entries", len(self._entries))

    def best(self, name: str) -> Optional[int]:
        entry = self._entries.get(name)
        return entry.score if entry is not None else None

    def leaderboard(self) -> List[dict]:
        return [dict(entry) for entry in self._top]

    def _compute_top(self) -> List[dict]:
        ranked = sorted(self._entries.values(), key=lambda entry: (-entry.score, entry.achieved))
        return [{"name": entry.name, "score": entry.score} for entry in ranked[: self.size]]

    def record(self, name: str, score: int) -> bool:
        """Register ``score`` for ``name``.

        Returns ``True`` if the leaderboard changed, in which case it has
        also been handed to the store.
        """

        entry = self._entries.get(name)
        if entry is not None and score <= entry.score:
            return False
        if entry is None:
            self._entries[name] = ScoreEntry(name, score, next(self._sequence))
        else:
            entry.score = score
            entry.achieved = next(self._sequence)

        top = self._compute_top()
        if top == self._top:
            return False
        self._top = top
        try:
            self.store.save(self.leaderboard())
        except OSError:
            logging.exception("Failed to persist high scores")
        return True
