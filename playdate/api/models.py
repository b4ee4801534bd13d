from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class PlayerId(StrEnum):
    player1 = "player1"
    player2 = "player2"

    @property
    def other(self) -> "PlayerId":
        return PlayerId.player2 if self is PlayerId.player1 else PlayerId.player1


class Emotion(StrEnum):
    happy = "happy"
    sad = "sad"
    surprised = "surprised"
    thinking = "thinking"


class DialogueLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    speaker: PlayerId
    text: str
    emotion: Emotion = Emotion.happy


class Tally(BaseModel):
    """Per-player counter pair (scores, move counts).

    Immutable: use `plus` to get an updated copy.
    """

    model_config = ConfigDict(frozen=True)

    player1: int = Field(0, ge=0)
    player2: int = Field(0, ge=0)

    def of(self, player: PlayerId) -> int:
        return self.player1 if player is PlayerId.player1 else self.player2

    def plus(self, player: PlayerId, amount: int) -> "Tally":
        return self.model_copy(update={player.value: self.of(player) + amount})

    @property
    def total(self) -> int:
        return self.player1 + self.player2


class SessionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: Tally = Field(default_factory=Tally)

    # Unique, insertion-ordered.
    achievements: tuple[str, ...] = ()


class Accessory(StrEnum):
    glasses = "glasses"
    hat = "hat"
    bowtie = "bowtie"
    necklace = "necklace"
    none = "none"


class Character(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: PlayerId
    name: str = Field(..., min_length=1, max_length=12)
    hair_color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    skin_color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    outfit_color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    accessory: Accessory = Accessory.none


class CharacterUpdateRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=12)
    hair_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    skin_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    outfit_color: str | None = Field(None, pattern=HEX_COLOR_PATTERN)
    accessory: Accessory | None = None


class GameType(StrEnum):
    memory_match = "memory_match"
    word_guess = "word_guess"
    draw_together = "draw_together"


class GameInfo(BaseModel):
    id: GameType
    name: str
    description: str
    difficulty: str


class Card(BaseModel):
    id: int
    symbol: str
    is_flipped: bool = False
    is_matched: bool = False


class MemoryMatchPhase(StrEnum):
    playing = "playing"
    game_over = "game_over"


class MemoryMatchState(BaseModel):
    cards: list[Card]

    # Ids of face-up, not-yet-resolved cards (0..2).
    flipped: list[int] = Field(default_factory=list)
    matched_pairs: int = Field(0, ge=0, le=8)
    current_player: PlayerId = PlayerId.player1
    moves: Tally = Field(default_factory=Tally)
    phase: MemoryMatchPhase = MemoryMatchPhase.playing


class WordCluePhase(StrEnum):
    setup = "setup"
    clue = "clue"
    guess = "guess"
    result = "result"


class RoundOutcome(StrEnum):
    correct = "correct"
    incorrect = "incorrect"


class WordClueState(BaseModel):
    phase: WordCluePhase = WordCluePhase.setup

    # Clue-giver for the round in progress; the other player guesses.
    current_player: PlayerId = PlayerId.player1

    word: str = ""
    clue: str = ""
    guess: str = ""
    time_left: int = Field(0, ge=0)
    outcome: RoundOutcome | None = None
    rounds_played: int = Field(0, ge=0)

    # Scoreboard for this game only; reset by "restart".
    score: Tally = Field(default_factory=Tally)

    @property
    def clue_giver(self) -> PlayerId:
        return self.current_player

    @property
    def guesser(self) -> PlayerId:
        return self.current_player.other


class CanvasState(BaseModel):
    current_player: PlayerId = PlayerId.player1
    prompt: str = ""

    # Append-only. Entries are opaque image artifacts from the drawing surface.
    gallery: list[bytes] = Field(default_factory=list)
    view_index: int = -1

    stroke_color: str = Field("#000000", pattern=HEX_COLOR_PATTERN)
    stroke_width: int = Field(5, ge=1, le=30)


class SurfaceUploadRequest(BaseModel):
    # `data:image/png;base64,...` as produced by canvas.toDataURL().
    data_url: str = Field(..., min_length=1)


class GameView(BaseModel):
    game_type: GameType
    state: dict[str, object]
    dialogue: list[DialogueLine]
    characters: list[Character]
    timer_pending: bool


class GameCatalogResponse(BaseModel):
    games: list[GameInfo]
