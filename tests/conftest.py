from __future__ import annotations

import random
from collections.abc import Callable, Generator
from dataclasses import dataclass, field

import fakeredis
import pytest
from fastapi.testclient import TestClient

from playdate.api.models import Card, MemoryMatchState
from playdate.arcade import Arcade, build_arcade
from playdate.config import Settings


@dataclass
class ManualHandle:
    due: float
    seq: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Fake clock: callbacks only run when a test calls `advance`."""

    now: float = 0.0
    _handles: list[ManualHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(due=self.now + delay, seq=len(self._handles), callback=callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self._handles if not h.cancelled and not h.fired]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.due, h.seq))
            self.now = handle.due
            handle.fired = True
            handle.callback()
        self.now = target


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def r() -> fakeredis.FakeRedis:
    return fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture()
def arcade(r: fakeredis.FakeRedis, scheduler: ManualScheduler, rng: random.Random) -> Arcade:
    return build_arcade(settings=Settings(), r=r, scheduler=scheduler, rng=rng)


@pytest.fixture()
def client(arcade: Arcade) -> Generator[TestClient, None, None]:
    from playdate.api.deps import init_arcade, reset_arcade_for_tests
    from playdate.main import app

    reset_arcade_for_tests()
    init_arcade(arcade=arcade)
    with TestClient(app) as c:
        yield c
    reset_arcade_for_tests()


@pytest.fixture()
def alternating_deck() -> MemoryMatchState:
    """Cards laid out 🐱,🐶,🐱,🐶,... with id == index."""

    symbols = ["🐱", "🐶"] * 8
    return MemoryMatchState(cards=[Card(id=i, symbol=s) for i, s in enumerate(symbols)])


@pytest.fixture()
def paired_deck() -> MemoryMatchState:
    """Eight distinct pairs laid out side by side (0-1, 2-3, ...), id == index."""

    from playdate.engines.memory_match import SYMBOLS

    symbols = [s for s in SYMBOLS for _ in range(2)]
    return MemoryMatchState(cards=[Card(id=i, symbol=s) for i, s in enumerate(symbols)])
