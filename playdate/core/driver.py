from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

from playdate.api.models import Character, DialogueLine, GameType, PlayerId
from playdate.core.events import (
    Applied,
    ArmTimer,
    CancelTimer,
    ClearSurface,
    ConfigureStroke,
    Effect,
    ExportSurface,
    LoadSnapshot,
    ScoreAwarded,
    ShowDialogue,
)
from playdate.core.timers import Scheduler, TimerSlot
from playdate.surfaces import DrawingSurface

logger = logging.getLogger(__name__)

S = TypeVar("S")
E = TypeVar("E")

ScoreCallback = Callable[[PlayerId, int], None]


@dataclass(frozen=True, slots=True)
class ExportedFile:
    filename: str
    content: bytes


class EngineDriver(Generic[S, E]):
    """Runs one engine instance: feeds events through its pure transition and
    performs the resulting effects.

    Contract:
      - one timer slot per driver; `ArmTimer` replaces whatever is pending.
      - score effects go to `on_score_update` (additive, never absolute).
      - dialogue is replaced wholesale by each `ShowDialogue`.
      - after `close()`, every event (including a late timer fire) is ignored.
    """

    def __init__(
        self,
        *,
        game_type: GameType,
        opening: Applied[S],
        transition: Callable[[S, E], Applied[S]],
        scheduler: Scheduler,
        on_score_update: ScoreCallback,
        characters: Iterable[Character] = (),
        surface: DrawingSurface | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self.game_type = game_type
        self.characters = tuple(characters)
        self.surface = surface
        self.state: S = opening.state
        self.dialogue: list[DialogueLine] = []
        self.last_export: ExportedFile | None = None
        self.closed = False

        self._transition = transition
        self._timer = TimerSlot(scheduler=scheduler)
        self._on_score_update = on_score_update
        self._on_change = on_change

        self._perform(opening.effects)

    @property
    def timer_pending(self) -> bool:
        return self._timer.pending

    def dispatch(self, event: E) -> bool:
        """Apply one event. Returns True if anything observable changed."""

        if self.closed:
            logger.debug("%s: driver closed, dropping %r", self.game_type.value, event)
            return False

        applied = self._transition(self.state, event)
        self.state = applied.state
        self._perform(applied.effects)

        changed = applied.state_changed or bool(applied.effects)
        if changed and self._on_change is not None:
            self._on_change()
        return changed

    def close(self) -> None:
        self._timer.cancel()
        self.closed = True

    def _require_surface(self) -> DrawingSurface:
        if self.surface is None:
            raise RuntimeError(f"{self.game_type.value} emitted a surface effect but has no drawing surface")
        return self.surface

    def _perform(self, effects: Iterable[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, ScoreAwarded):
                self._on_score_update(effect.player, effect.points)
            elif isinstance(effect, ShowDialogue):
                self.dialogue = list(effect.lines)
            elif isinstance(effect, ArmTimer):
                event = effect.event
                self._timer.arm(effect.delay_s, lambda: self.dispatch(event))  # type: ignore[arg-type]
            elif isinstance(effect, CancelTimer):
                self._timer.cancel()
            elif isinstance(effect, ClearSurface):
                self._require_surface().clear()
            elif isinstance(effect, LoadSnapshot):
                self._require_surface().load(effect.image)
            elif isinstance(effect, ExportSurface):
                self.last_export = ExportedFile(filename=effect.filename, content=self._require_surface().export())
            elif isinstance(effect, ConfigureStroke):
                self._require_surface().set_stroke(color=effect.color, width=effect.width)
            else:
                raise ValueError(f"Unknown effect: {effect!r}")
