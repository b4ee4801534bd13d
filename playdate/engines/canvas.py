from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass
from typing import Literal

from playdate.api.models import HEX_COLOR_PATTERN, CanvasState
from playdate.core.events import (
    Applied,
    ClearSurface,
    ConfigureStroke,
    ExportSurface,
    LoadSnapshot,
    ScoreAwarded,
    ShowDialogue,
)
from playdate.dialogue import DialogueEvent, dialogue_for

logger = logging.getLogger(__name__)


PROMPTS: tuple[str, ...] = (
    "A sunset at the beach",
    "A cozy cabin in the woods",
    "Your dream vacation",
    "A funny animal",
    "Your favorite food",
    "A magical creature",
    "A futuristic city",
    "A beautiful garden",
    "Your ideal date",
    "A fantasy castle",
)

SAVE_POINTS = 3
DOWNLOAD_FILENAME = "couples-drawing.png"


@dataclass(frozen=True, slots=True)
class CanvasRules:
    prompts: tuple[str, ...] = PROMPTS
    min_stroke_width: int = 1
    max_stroke_width: int = 30


@dataclass(frozen=True, slots=True)
class Save:
    """Finish the current turn with `snapshot` (taken from the surface by the caller)."""

    snapshot: bytes


@dataclass(frozen=True, slots=True)
class Clear:
    pass


@dataclass(frozen=True, slots=True)
class Navigate:
    direction: Literal["prev", "next"]


@dataclass(frozen=True, slots=True)
class Download:
    pass


@dataclass(frozen=True, slots=True)
class SetStroke:
    color: str
    width: int


CanvasEvent = Save | Clear | Navigate | Download | SetStroke


def start(*, rng: random.Random, rules: CanvasRules | None = None) -> Applied[CanvasState]:
    rules = rules or CanvasRules()
    state = CanvasState(prompt=rng.choice(rules.prompts))
    return Applied(
        state=state,
        effects=(
            ConfigureStroke(color=state.stroke_color, width=state.stroke_width),
            ShowDialogue(tuple(dialogue_for(DialogueEvent.canvas_intro))),
        ),
    )


def _save(state: CanvasState, event: Save, *, rng: random.Random, rules: CanvasRules) -> Applied[CanvasState]:
    nxt = state.model_copy(deep=True)
    finisher = nxt.current_player

    nxt.gallery.append(event.snapshot)
    nxt.view_index = len(nxt.gallery) - 1
    nxt.current_player = finisher.other

    # Both players have had a turn: new round, new prompt.
    if len(nxt.gallery) % 2 == 0:
        nxt.prompt = rng.choice(rules.prompts)

    return Applied(
        state=nxt,
        effects=(
            ClearSurface(),
            ScoreAwarded(player=finisher, points=SAVE_POINTS),
            ShowDialogue(tuple(dialogue_for(DialogueEvent.canvas_saved, actor=finisher))),
        ),
    )


def _navigate(state: CanvasState, event: Navigate) -> Applied[CanvasState]:
    if not state.gallery:
        return Applied.unchanged(state)

    step = -1 if event.direction == "prev" else 1
    index = min(max(state.view_index + step, 0), len(state.gallery) - 1)

    nxt = state.model_copy(update={"view_index": index})
    return Applied(
        state=nxt,
        effects=(ClearSurface(), LoadSnapshot(image=state.gallery[index])),
        state_changed=index != state.view_index,
    )


def _set_stroke(state: CanvasState, event: SetStroke, *, rules: CanvasRules) -> Applied[CanvasState]:
    if not re.fullmatch(HEX_COLOR_PATTERN, event.color):
        logger.debug("canvas: ignoring stroke color %r", event.color)
        return Applied.unchanged(state)

    width = min(max(event.width, rules.min_stroke_width), rules.max_stroke_width)
    nxt = state.model_copy(update={"stroke_color": event.color, "stroke_width": width})
    return Applied(state=nxt, effects=(ConfigureStroke(color=event.color, width=width),))


def transition(
    state: CanvasState,
    event: CanvasEvent,
    *,
    rng: random.Random,
    rules: CanvasRules | None = None,
) -> Applied[CanvasState]:
    rules = rules or CanvasRules()

    if isinstance(event, Save):
        return _save(state, event, rng=rng, rules=rules)

    if isinstance(event, Clear):
        # No penalty and no rate limit; gallery and turn order are untouched.
        return Applied(
            state=state,
            effects=(
                ClearSurface(),
                ShowDialogue(tuple(dialogue_for(DialogueEvent.canvas_cleared, actor=state.current_player))),
            ),
            state_changed=False,
        )

    if isinstance(event, Navigate):
        return _navigate(state, event)

    if isinstance(event, Download):
        return Applied(
            state=state,
            effects=(
                ExportSurface(filename=DOWNLOAD_FILENAME),
                ShowDialogue(tuple(dialogue_for(DialogueEvent.canvas_download))),
            ),
            state_changed=False,
        )

    if isinstance(event, SetStroke):
        return _set_stroke(state, event, rules=rules)

    raise ValueError(f"Unknown canvas event: {event!r}")
