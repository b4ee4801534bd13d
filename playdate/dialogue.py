from __future__ import annotations

from enum import StrEnum

from playdate.api.models import DialogueLine, Emotion, PlayerId


class DialogueEvent(StrEnum):
    memory_start = "memory_start"
    memory_match = "memory_match"
    memory_miss = "memory_miss"
    memory_win = "memory_win"
    memory_tie = "memory_tie"

    word_intro = "word_intro"
    word_round_start = "word_round_start"
    word_clue_given = "word_clue_given"
    word_correct = "word_correct"
    word_incorrect = "word_incorrect"
    word_clue_timeout = "word_clue_timeout"
    word_guess_timeout = "word_guess_timeout"
    word_restart = "word_restart"

    canvas_intro = "canvas_intro"
    canvas_saved = "canvas_saved"
    canvas_cleared = "canvas_cleared"
    canvas_download = "canvas_download"


# Speaker slots: "actor" is the player the event is about, "other" is their partner.
# Fixed seats ("player1"/"player2") are used for lines that don't depend on whose turn it is.
_Rule = tuple[tuple[str, str, Emotion], ...]

RULES: dict[DialogueEvent, _Rule] = {
    DialogueEvent.memory_start: (
        ("player1", "Ready to test your memory?", Emotion.happy),
        ("player2", "Let's see who can remember more!", Emotion.happy),
    ),
    DialogueEvent.memory_match: (("actor", "Nice! I found a match!", Emotion.happy),),
    DialogueEvent.memory_miss: (
        ("actor", "Oops, no match!", Emotion.sad),
        ("other", "My turn now!", Emotion.happy),
    ),
    DialogueEvent.memory_win: (
        ("actor", "I won! My memory is better.", Emotion.happy),
        ("other", "Good game! One more round?", Emotion.thinking),
    ),
    DialogueEvent.memory_tie: (
        ("player1", "It's a tie! I'll take the tie-break bonus.", Emotion.surprised),
        ("player2", "Great game! Let's play again.", Emotion.happy),
    ),
    DialogueEvent.word_intro: (
        ("player1", "Let's see how well we can describe words!", Emotion.happy),
        ("player2", "I'm ready to guess! This will be fun.", Emotion.happy),
    ),
    DialogueEvent.word_round_start: (("actor", "I need to describe the word without saying it!", Emotion.thinking),),
    DialogueEvent.word_clue_given: (
        ("actor", "{clue}", Emotion.happy),
        ("other", "Let me think about what this could be...", Emotion.thinking),
    ),
    DialogueEvent.word_correct: (
        ("other", "Yes! That's correct!", Emotion.happy),
        ("actor", "Great job guessing!", Emotion.happy),
    ),
    DialogueEvent.word_incorrect: (
        ("other", "No, that's not it. The word was: {word}", Emotion.sad),
        ("actor", "Maybe my clue wasn't clear enough.", Emotion.thinking),
    ),
    DialogueEvent.word_clue_timeout: (("actor", "Time's up! I couldn't think of a good clue.", Emotion.sad),),
    DialogueEvent.word_guess_timeout: (("other", "Time's up! The word was: {word}", Emotion.thinking),),
    DialogueEvent.word_restart: (
        ("player1", "Let's start fresh!", Emotion.happy),
        ("player2", "I'm ready for a new game!", Emotion.happy),
    ),
    DialogueEvent.canvas_intro: (
        ("player1", "Let's create something beautiful together!", Emotion.happy),
        ("player2", "I can't wait to see what we draw!", Emotion.happy),
    ),
    DialogueEvent.canvas_saved: (
        ("actor", "I'm finished with my part!", Emotion.happy),
        ("other", "Now it's my turn to add to our masterpiece!", Emotion.happy),
    ),
    DialogueEvent.canvas_cleared: (("actor", "Let's start over!", Emotion.happy),),
    DialogueEvent.canvas_download: (
        ("player1", "We should frame this!", Emotion.happy),
        ("player2", "It's our first masterpiece together!", Emotion.happy),
    ),
}


def _speaker(slot: str, actor: PlayerId) -> PlayerId:
    if slot == "actor":
        return actor
    if slot == "other":
        return actor.other
    return PlayerId(slot)


def dialogue_for(event: DialogueEvent, *, actor: PlayerId = PlayerId.player1, **params: str) -> list[DialogueLine]:
    """Return the lines for one narrative beat.

    Pure: the result depends only on the arguments. Callers replace the visible
    dialogue with it rather than appending.

    Example:
        dialogue_for(DialogueEvent.word_incorrect, actor=PlayerId.player1, word="coffee")
    """

    rule = RULES[event]
    return [
        DialogueLine(speaker=_speaker(slot, actor), text=text.format(**params), emotion=emotion)
        for slot, text, emotion in rule
    ]
