from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from playdate.api.models import Card, MemoryMatchPhase, MemoryMatchState, PlayerId
from playdate.core.events import Applied, ArmTimer, CancelTimer, Effect, ScoreAwarded, ShowDialogue
from playdate.dialogue import DialogueEvent, dialogue_for
from playdate.fsm import MemoryMatchFSM, try_advance

logger = logging.getLogger(__name__)


SYMBOLS: tuple[str, ...] = ("🐱", "🐶", "🐻", "🦊", "🦁", "🐯", "🐨", "🐼")

MATCH_POINTS = 2
CLEAR_BONUS = 10


@dataclass(frozen=True, slots=True)
class MemoryMatchRules:
    # Both faces stay visible this long before a pair resolves.
    match_delay_s: float = 0.5
    mismatch_delay_s: float = 1.0


@dataclass(frozen=True, slots=True)
class Flip:
    card_id: int


@dataclass(frozen=True, slots=True)
class ResolvePair:
    pass


@dataclass(frozen=True, slots=True)
class Restart:
    pass


MemoryMatchEvent = Flip | ResolvePair | Restart


def build_deck(symbols: Sequence[str] = SYMBOLS) -> list[Card]:
    """Two face-down cards per symbol, ids 0..2n-1 in deck order."""

    cards: list[Card] = []
    for i, symbol in enumerate(symbols):
        cards.append(Card(id=i * 2, symbol=symbol))
        cards.append(Card(id=i * 2 + 1, symbol=symbol))
    return cards


def deal(*, rng: random.Random, symbols: Sequence[str] = SYMBOLS) -> MemoryMatchState:
    cards = build_deck(symbols)
    # random.shuffle is an in-place Fisher-Yates.
    rng.shuffle(cards)
    return MemoryMatchState(cards=cards)


def start(*, rng: random.Random, rules: MemoryMatchRules | None = None) -> Applied[MemoryMatchState]:  # noqa: ARG001
    return Applied(
        state=deal(rng=rng),
        effects=(ShowDialogue(tuple(dialogue_for(DialogueEvent.memory_start))),),
    )


def _card(state: MemoryMatchState, card_id: int) -> Card | None:
    return next((c for c in state.cards if c.id == card_id), None)


def _flip(state: MemoryMatchState, event: Flip, rules: MemoryMatchRules) -> Applied[MemoryMatchState]:
    if state.phase == MemoryMatchPhase.game_over:
        return Applied.unchanged(state)

    # Two cards face-up means a resolution is pending.
    if len(state.flipped) >= 2:
        return Applied.unchanged(state)

    target = _card(state, event.card_id)
    if target is None or target.is_flipped or target.is_matched:
        logger.debug("memory_match: ignoring flip of card %s", event.card_id)
        return Applied.unchanged(state)

    nxt = state.model_copy(deep=True)
    card = _card(nxt, event.card_id)
    assert card is not None
    card.is_flipped = True
    nxt.flipped.append(card.id)

    if len(nxt.flipped) < 2:
        return Applied(state=nxt)

    # A pair is open: the move counts for whoever opened it, match or not.
    nxt.moves = nxt.moves.plus(nxt.current_player, 1)

    first, second = (_card(nxt, cid) for cid in nxt.flipped)
    assert first is not None and second is not None
    delay = rules.match_delay_s if first.symbol == second.symbol else rules.mismatch_delay_s
    return Applied(state=nxt, effects=(ArmTimer(delay_s=delay, event=ResolvePair()),))


def _resolve(state: MemoryMatchState) -> Applied[MemoryMatchState]:
    if len(state.flipped) != 2:
        return Applied.unchanged(state)

    nxt = state.model_copy(deep=True)
    first, second = (_card(nxt, cid) for cid in nxt.flipped)
    assert first is not None and second is not None
    nxt.flipped = []
    mover = nxt.current_player
    effects: list[Effect] = []

    if first.symbol != second.symbol:
        first.is_flipped = False
        second.is_flipped = False
        nxt.current_player = mover.other
        effects.append(ShowDialogue(tuple(dialogue_for(DialogueEvent.memory_miss, actor=mover))))
        return Applied(state=nxt, effects=tuple(effects))

    for card in (first, second):
        card.is_flipped = True
        card.is_matched = True
    nxt.matched_pairs += 1
    effects.append(ScoreAwarded(player=mover, points=MATCH_POINTS))

    if nxt.matched_pairs < len(nxt.cards) // 2:
        effects.append(ShowDialogue(tuple(dialogue_for(DialogueEvent.memory_match, actor=mover))))
        return Applied(state=nxt, effects=tuple(effects))

    try_advance(MemoryMatchFSM(nxt), "board_cleared")

    # Fewer moves wins; an exact tie goes to player1.
    p1, p2 = nxt.moves.player1, nxt.moves.player2
    winner = PlayerId.player1 if p1 <= p2 else PlayerId.player2
    effects.append(ScoreAwarded(player=winner, points=CLEAR_BONUS))
    if p1 == p2:
        lines = dialogue_for(DialogueEvent.memory_tie)
    else:
        lines = dialogue_for(DialogueEvent.memory_win, actor=winner)
    effects.append(ShowDialogue(tuple(lines)))
    return Applied(state=nxt, effects=tuple(effects))


def transition(
    state: MemoryMatchState,
    event: MemoryMatchEvent,
    *,
    rng: random.Random,
    rules: MemoryMatchRules | None = None,
) -> Applied[MemoryMatchState]:
    rules = rules or MemoryMatchRules()

    if isinstance(event, Flip):
        return _flip(state, event, rules)

    if isinstance(event, ResolvePair):
        return _resolve(state)

    if isinstance(event, Restart):
        # Any pending resolution belongs to the old deal.
        return Applied(
            state=deal(rng=rng),
            effects=(CancelTimer(), ShowDialogue(tuple(dialogue_for(DialogueEvent.memory_start)))),
        )

    raise ValueError(f"Unknown memory match event: {event!r}")
