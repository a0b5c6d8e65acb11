"""Shared pytest fixtures: deterministic game instances with a controllable clock."""

import random

import pytest

from snake_server.config import GameSettings
from snake_server.game import Game
from snake_server.scores import MemoryScoreStore, ScoreLedger


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryScoreStore()


@pytest.fixture
def settings():
    return GameSettings()


@pytest.fixture
def game(settings, store, clock):
    ledger = ScoreLedger(store, settings.leaderboard_size)
    ledger.load()
    return Game(settings, ledger, rng=random.Random(1234), clock=clock)
