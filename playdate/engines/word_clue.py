from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from playdate.api.models import PlayerId, RoundOutcome, Tally, WordCluePhase, WordClueState
from playdate.core.events import Applied, ArmTimer, CancelTimer, Effect, ScoreAwarded, ShowDialogue
from playdate.dialogue import DialogueEvent, dialogue_for
from playdate.fsm import WordClueFSM, try_advance

logger = logging.getLogger(__name__)


WORDS: tuple[str, ...] = (
    "sunset", "coffee", "rainbow", "bicycle", "pillow",
    "guitar", "dolphin", "birthday", "candle", "puzzle",
    "jungle", "popcorn", "camera", "balloon", "icecream",
    "mountain", "painting", "island", "garden", "umbrella",
)

CORRECT_GUESS_POINTS = 5
TICK_S = 1.0


@dataclass(frozen=True, slots=True)
class WordClueRules:
    clue_seconds: int = 60
    guess_seconds: int = 30
    words: tuple[str, ...] = WORDS


@dataclass(frozen=True, slots=True)
class StartRound:
    pass


@dataclass(frozen=True, slots=True)
class SubmitClue:
    text: str


@dataclass(frozen=True, slots=True)
class SubmitGuess:
    text: str


@dataclass(frozen=True, slots=True)
class Tick:
    """One second of countdown elapsed."""


@dataclass(frozen=True, slots=True)
class NextRound:
    pass


@dataclass(frozen=True, slots=True)
class RestartGame:
    pass


WordClueEvent = StartRound | SubmitClue | SubmitGuess | Tick | NextRound | RestartGame


def _say(event: DialogueEvent, *, actor: PlayerId = PlayerId.player1, **params: str) -> ShowDialogue:
    return ShowDialogue(tuple(dialogue_for(event, actor=actor, **params)))


def is_correct_guess(*, guess: str, word: str) -> bool:
    return guess.strip().casefold() == word.strip().casefold()


def start(*, rng: random.Random, rules: WordClueRules | None = None) -> Applied[WordClueState]:  # noqa: ARG001
    return Applied(state=WordClueState(), effects=(_say(DialogueEvent.word_intro),))


def _clear_round(state: WordClueState) -> None:
    state.word = ""
    state.clue = ""
    state.guess = ""
    state.time_left = 0
    state.outcome = None


def _finish_round(state: WordClueState, *, outcome: RoundOutcome) -> list[Effect]:
    """Record the outcome on an already-advanced `result` state."""

    state.outcome = outcome
    state.rounds_played += 1
    effects: list[Effect] = []
    if outcome == RoundOutcome.correct:
        state.score = state.score.plus(state.guesser, CORRECT_GUESS_POINTS)
        effects.append(ScoreAwarded(player=state.guesser, points=CORRECT_GUESS_POINTS))
    return effects


def _start_round(state: WordClueState, *, rng: random.Random, rules: WordClueRules) -> Applied[WordClueState]:
    nxt = state.model_copy(deep=True)
    if not try_advance(WordClueFSM(nxt), "round_started"):
        return Applied.unchanged(state)

    _clear_round(nxt)
    # With replacement: the same word may come up in consecutive rounds.
    nxt.word = rng.choice(rules.words)
    nxt.time_left = rules.clue_seconds
    return Applied(
        state=nxt,
        effects=(
            ArmTimer(delay_s=TICK_S, event=Tick()),
            _say(DialogueEvent.word_round_start, actor=nxt.clue_giver),
        ),
    )


def _submit_clue(state: WordClueState, event: SubmitClue, *, rules: WordClueRules) -> Applied[WordClueState]:
    clue = event.text.strip()
    if not clue:
        return Applied.unchanged(state)

    nxt = state.model_copy(deep=True)
    if not try_advance(WordClueFSM(nxt), "clue_submitted"):
        return Applied.unchanged(state)

    nxt.clue = clue
    nxt.time_left = rules.guess_seconds
    # Re-arming replaces the clue countdown with the guess countdown.
    return Applied(
        state=nxt,
        effects=(
            ArmTimer(delay_s=TICK_S, event=Tick()),
            _say(DialogueEvent.word_clue_given, actor=nxt.clue_giver, clue=clue),
        ),
    )


def _submit_guess(state: WordClueState, event: SubmitGuess) -> Applied[WordClueState]:
    guess = event.text.strip()
    if not guess:
        return Applied.unchanged(state)

    nxt = state.model_copy(deep=True)
    if not try_advance(WordClueFSM(nxt), "guess_submitted"):
        return Applied.unchanged(state)

    nxt.guess = guess
    correct = is_correct_guess(guess=guess, word=nxt.word)
    effects: list[Effect] = [CancelTimer()]
    effects.extend(_finish_round(nxt, outcome=RoundOutcome.correct if correct else RoundOutcome.incorrect))
    if correct:
        effects.append(_say(DialogueEvent.word_correct, actor=nxt.clue_giver))
    else:
        effects.append(_say(DialogueEvent.word_incorrect, actor=nxt.clue_giver, word=nxt.word))
    return Applied(state=nxt, effects=tuple(effects))


def _tick(state: WordClueState) -> Applied[WordClueState]:
    fsm = WordClueFSM(state)
    if fsm.current_state not in (fsm.giving_clue, fsm.guessing) or state.time_left <= 0:
        # A tick from a countdown that no longer applies.
        logger.debug("word_clue: dropping tick in phase %s", state.phase.value)
        return Applied.unchanged(state)

    nxt = state.model_copy(deep=True)
    nxt.time_left -= 1
    if nxt.time_left > 0:
        return Applied(state=nxt, effects=(ArmTimer(delay_s=TICK_S, event=Tick()),))

    giver = nxt.clue_giver
    if nxt.phase == WordCluePhase.clue:
        try_advance(WordClueFSM(nxt), "clue_timed_out")
        # Abandoned: straight back to setup, and the other player gives the next clue.
        _clear_round(nxt)
        nxt.current_player = giver.other
        return Applied(state=nxt, effects=(_say(DialogueEvent.word_clue_timeout, actor=giver),))

    try_advance(WordClueFSM(nxt), "guess_timed_out")
    effects = _finish_round(nxt, outcome=RoundOutcome.incorrect)
    effects.append(_say(DialogueEvent.word_guess_timeout, actor=giver, word=nxt.word))
    return Applied(state=nxt, effects=tuple(effects))


def _next_round(state: WordClueState) -> Applied[WordClueState]:
    nxt = state.model_copy(deep=True)
    if not try_advance(WordClueFSM(nxt), "next_round"):
        return Applied.unchanged(state)

    _clear_round(nxt)
    nxt.current_player = nxt.current_player.other
    return Applied(state=nxt)


def _restart(state: WordClueState) -> Applied[WordClueState]:
    nxt = state.model_copy(deep=True)
    try_advance(WordClueFSM(nxt), "restart")
    _clear_round(nxt)
    nxt.current_player = PlayerId.player1
    nxt.rounds_played = 0
    nxt.score = Tally()
    return Applied(state=nxt, effects=(CancelTimer(), _say(DialogueEvent.word_restart)))


def transition(
    state: WordClueState,
    event: WordClueEvent,
    *,
    rng: random.Random,
    rules: WordClueRules | None = None,
) -> Applied[WordClueState]:
    rules = rules or WordClueRules()

    if isinstance(event, StartRound):
        return _start_round(state, rng=rng, rules=rules)
    if isinstance(event, SubmitClue):
        return _submit_clue(state, event, rules=rules)
    if isinstance(event, SubmitGuess):
        return _submit_guess(state, event)
    if isinstance(event, Tick):
        return _tick(state)
    if isinstance(event, NextRound):
        return _next_round(state)
    if isinstance(event, RestartGame):
        return _restart(state)

    raise ValueError(f"Unknown word clue event: {event!r}")
