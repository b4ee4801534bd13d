from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from playdate.api.models import DialogueLine, PlayerId

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class ScoreAwarded:
    player: PlayerId
    points: int


@dataclass(frozen=True, slots=True)
class ArmTimer:
    """Arm the engine's single timer slot; replaces whatever was pending."""

    delay_s: float
    event: object


@dataclass(frozen=True, slots=True)
class CancelTimer:
    pass


@dataclass(frozen=True, slots=True)
class ShowDialogue:
    lines: tuple[DialogueLine, ...]


@dataclass(frozen=True, slots=True)
class ClearSurface:
    pass


@dataclass(frozen=True, slots=True)
class LoadSnapshot:
    image: bytes


@dataclass(frozen=True, slots=True)
class ExportSurface:
    filename: str


@dataclass(frozen=True, slots=True)
class ConfigureStroke:
    color: str
    width: int


Effect = ScoreAwarded | ArmTimer | CancelTimer | ShowDialogue | ClearSurface | LoadSnapshot | ExportSurface | ConfigureStroke


@dataclass(frozen=True, slots=True)
class Applied(Generic[S]):
    """Result of applying an event to an engine state.

    - `state`: the next state (the input state is never mutated).
    - `effects`: side effects for the driver to perform, in order.
    - `state_changed`: if the authoritative game state moved.
    """

    state: S
    effects: tuple[Effect, ...] = ()
    state_changed: bool = True

    @staticmethod
    def unchanged(state: S) -> "Applied[S]":
        return Applied(state=state, effects=(), state_changed=False)
