from __future__ import annotations

import pytest
from statemachine.exceptions import TransitionNotAllowed

from playdate.api.models import MemoryMatchPhase, MemoryMatchState, PlayerId, WordCluePhase, WordClueState
from playdate.dialogue import RULES, DialogueEvent, dialogue_for
from playdate.fsm import MemoryMatchFSM, WordClueFSM, try_advance


def test_every_event_has_lines() -> None:
    assert set(RULES) == set(DialogueEvent)
    for event in DialogueEvent:
        params = {"clue": "x", "word": "y"}
        assert dialogue_for(event, **params)


def test_dialogue_is_pure() -> None:
    a = dialogue_for(DialogueEvent.memory_miss, actor=PlayerId.player2)
    b = dialogue_for(DialogueEvent.memory_miss, actor=PlayerId.player2)
    assert a == b
    assert [line.speaker for line in a] == [PlayerId.player2, PlayerId.player1]


def test_fixed_seat_lines_ignore_actor() -> None:
    lines = dialogue_for(DialogueEvent.canvas_download, actor=PlayerId.player2)
    assert [line.speaker for line in lines] == [PlayerId.player1, PlayerId.player2]


def test_params_are_interpolated() -> None:
    lines = dialogue_for(DialogueEvent.word_incorrect, actor=PlayerId.player1, word="coffee")
    assert lines[0].speaker == PlayerId.player2
    assert lines[0].text.endswith("coffee")


def test_word_clue_fsm_full_cycle() -> None:
    game = WordClueState()
    fsm = WordClueFSM(game)

    for event, phase in [
        ("round_started", WordCluePhase.clue),
        ("clue_submitted", WordCluePhase.guess),
        ("guess_submitted", WordCluePhase.result),
        ("next_round", WordCluePhase.setup),
    ]:
        assert try_advance(fsm, event)
        assert game.phase == phase


def test_word_clue_fsm_resumes_from_model_phase() -> None:
    game = WordClueState(phase=WordCluePhase.guess)
    fsm = WordClueFSM(game)
    assert fsm.current_state == fsm.guessing

    with pytest.raises(TransitionNotAllowed):
        fsm.send("clue_submitted")


def test_try_advance_leaves_model_alone_when_not_allowed() -> None:
    game = WordClueState()
    assert try_advance(WordClueFSM(game), "guess_timed_out") is False
    assert game.phase == WordCluePhase.setup


@pytest.mark.parametrize("phase", list(WordCluePhase))
def test_restart_allowed_from_every_phase(phase: WordCluePhase) -> None:
    game = WordClueState(phase=phase)
    assert try_advance(WordClueFSM(game), "restart")
    assert game.phase == WordCluePhase.setup


def test_memory_match_fsm_game_over_and_redeal() -> None:
    game = MemoryMatchState(cards=[])
    fsm = MemoryMatchFSM(game)

    assert try_advance(fsm, "board_cleared")
    assert game.phase == MemoryMatchPhase.game_over
    assert try_advance(fsm, "board_cleared") is False

    assert try_advance(fsm, "redeal")
    assert game.phase == MemoryMatchPhase.playing
