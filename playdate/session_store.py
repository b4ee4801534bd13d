from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

import redis
from pydantic import ValidationError

from playdate.api.models import PlayerId, SessionState, Tally

logger = logging.getLogger(__name__)


SESSION_KEY = "playdate:session"

CENTURY = "Century"

AchievementRule = tuple[str, Callable[[Tally], bool]]

# Each predicate must be idempotent and monotonic: once earned, always earned.
ACHIEVEMENT_RULES: tuple[AchievementRule, ...] = ((CENTURY, lambda score: score.total >= 100),)


def evaluate_achievements(
    *,
    score: Tally,
    achievements: Sequence[str],
    rules: Sequence[AchievementRule] = ACHIEVEMENT_RULES,
) -> tuple[str, ...]:
    """Return the achievement list for `score`.

    Existing achievements are kept (de-duplicated, order preserved); newly
    earned ones are appended in rule order.
    """

    out = list(dict.fromkeys(achievements))
    for name, earned in rules:
        if name not in out and earned(score):
            out.append(name)
    return tuple(out)


class SessionPersistence(Protocol):
    def load(self) -> SessionState | None:  # pragma: no cover
        ...

    def save(self, state: SessionState) -> None:  # pragma: no cover
        ...


class RedisSessionPersistence:
    def __init__(self, *, r: redis.Redis, key: str = SESSION_KEY) -> None:
        self._r = r
        self._key = key

    def load(self) -> SessionState | None:
        raw = self._r.get(self._key)
        if not raw:
            return None
        return SessionState.model_validate_json(raw)

    def save(self, state: SessionState) -> None:
        self._r.set(self._key, state.model_dump_json())


Listener = Callable[[SessionState], None]


class SessionStore:
    """Cumulative score + achievements shared by every engine.

    Each mutation builds a new immutable `SessionState` with the achievement
    list already re-evaluated and swaps it in as one step, so readers never see
    a score without its matching achievements. Persistence is best-effort.
    """

    def __init__(self, *, persistence: SessionPersistence | None = None, initial: SessionState | None = None) -> None:
        self._persistence = persistence
        self._state = initial or SessionState()
        self._listeners: list[Listener] = []

    @classmethod
    def open(cls, *, persistence: SessionPersistence) -> "SessionStore":
        """Create a store seeded from persisted state (zero-valued if absent or unreadable)."""

        store = cls(persistence=persistence)
        try:
            loaded = persistence.load()
        except (redis.RedisError, OSError, ValidationError) as e:
            logger.warning("session: could not load persisted state, starting fresh: %s", e)
            loaded = None
        if loaded is not None:
            store.merge(loaded)
        return store

    @property
    def state(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def apply_score(self, player: PlayerId, points: int) -> SessionState:
        if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
            raise ValueError("points must be a positive integer")

        current = self._state
        self._commit(self._evaluated(current.score.plus(PlayerId(player), points), current.achievements))
        logger.info("session: %s +%d (total %d)", PlayerId(player).value, points, self._state.score.total)
        return self._state

    def merge(self, snapshot: SessionState) -> SessionState:
        """Fold another snapshot in without ever lowering a score or dropping an achievement."""

        current = self._state
        score = Tally(
            player1=max(current.score.player1, snapshot.score.player1),
            player2=max(current.score.player2, snapshot.score.player2),
        )
        merged = self._evaluated(score, (*current.achievements, *snapshot.achievements))
        if merged != current:
            self._commit(merged)
        return self._state

    def evaluate_achievements(self) -> tuple[str, ...]:
        return evaluate_achievements(score=self._state.score, achievements=self._state.achievements)

    @staticmethod
    def _evaluated(score: Tally, achievements: Sequence[str]) -> SessionState:
        return SessionState(score=score, achievements=evaluate_achievements(score=score, achievements=achievements))

    def _commit(self, state: SessionState) -> None:
        self._state = state
        for listener in self._listeners:
            listener(state)
        self._persist(state)

    def _persist(self, state: SessionState) -> None:
        if self._persistence is None:
            return
        try:
            self._persistence.save(state)
        except (redis.RedisError, OSError) as e:
            # In-memory state stays authoritative; the next successful write catches up.
            logger.warning("session: failed to persist state: %s", e)
