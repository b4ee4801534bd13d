from __future__ import annotations

import logging

from statemachine import State, StateMachine
from statemachine.exceptions import TransitionNotAllowed

from playdate.api.models import MemoryMatchPhase, MemoryMatchState, WordCluePhase, WordClueState

logger = logging.getLogger(__name__)


class MemoryMatchFSM(StateMachine):
    """FSM wrapper around MemoryMatchState.

    Only guards the coarse phase; flip/resolve bookkeeping lives in the engine.
    """

    playing = State(MemoryMatchPhase.playing.value, value=MemoryMatchPhase.playing.value, initial=True)
    game_over = State(MemoryMatchPhase.game_over.value, value=MemoryMatchPhase.game_over.value)

    board_cleared = playing.to(game_over)
    redeal = playing.to(playing) | game_over.to(playing)

    def __init__(self, game: MemoryMatchState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = MemoryMatchPhase(str(self.current_state.value))


class WordClueFSM(StateMachine):
    """FSM wrapper around WordClueState.

    phases: setup -> clue -> guess -> result -> setup, with a clue timeout
    short-circuiting back to setup and restart reachable from anywhere.
    """

    awaiting_start = State(WordCluePhase.setup.value, value=WordCluePhase.setup.value, initial=True)
    giving_clue = State(WordCluePhase.clue.value, value=WordCluePhase.clue.value)
    guessing = State(WordCluePhase.guess.value, value=WordCluePhase.guess.value)
    showing_result = State(WordCluePhase.result.value, value=WordCluePhase.result.value)

    round_started = awaiting_start.to(giving_clue)
    clue_submitted = giving_clue.to(guessing)
    clue_timed_out = giving_clue.to(awaiting_start)
    guess_submitted = guessing.to(showing_result)
    guess_timed_out = guessing.to(showing_result)
    next_round = showing_result.to(awaiting_start)
    restart = (
        awaiting_start.to(awaiting_start)
        | giving_clue.to(awaiting_start)
        | guessing.to(awaiting_start)
        | showing_result.to(awaiting_start)
    )

    def __init__(self, game: WordClueState):
        self.game = game
        super().__init__(start_value=game.phase.value)

    def sync_phase_to_model(self) -> None:
        self.game.phase = WordCluePhase(str(self.current_state.value))


def try_advance(fsm: MemoryMatchFSM | WordClueFSM, event: str) -> bool:
    """Fire `event` and sync the phase back onto the model.

    Returns False (leaving the model untouched) if the event is not allowed in
    the current phase.
    """

    try:
        fsm.send(event)
    except TransitionNotAllowed:
        logger.debug("%s: event %r not allowed in phase %r", type(fsm).__name__, event, fsm.current_state.value)
        return False
    fsm.sync_phase_to_model()
    return True
