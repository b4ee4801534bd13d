from __future__ import annotations

import logging
import random
from dataclasses import dataclass

import redis
from pydantic import ValidationError

from playdate.api.models import Accessory, Character, CharacterUpdateRequest, PlayerId

logger = logging.getLogger(__name__)


CHARACTER_KEY_PREFIX = "playdate:character:"  # + {player}

HAIR_COLORS = ("#6B3FA0", "#3A86FF", "#FB8500", "#DC2F02", "#001219", "#4A5859")
SKIN_COLORS = ("#FFD3B6", "#F9DCC4", "#E8DAB2", "#C6AC8F", "#AD8A64")
OUTFIT_COLORS = ("#FF8BA7", "#8BD3DD", "#FFBE0B", "#3BCEAC", "#CD5334")

DEFAULT_CHARACTERS: dict[PlayerId, Character] = {
    PlayerId.player1: Character(
        id=PlayerId.player1,
        name="Player 1",
        hair_color="#6B3FA0",
        skin_color="#FFD3B6",
        outfit_color="#FF8BA7",
        accessory=Accessory.glasses,
    ),
    PlayerId.player2: Character(
        id=PlayerId.player2,
        name="Player 2",
        hair_color="#3A86FF",
        skin_color="#F9DCC4",
        outfit_color="#8BD3DD",
        accessory=Accessory.hat,
    ),
}


@dataclass(frozen=True, slots=True)
class Roster:
    player1: Character
    player2: Character

    @staticmethod
    def default() -> "Roster":
        return Roster(player1=DEFAULT_CHARACTERS[PlayerId.player1], player2=DEFAULT_CHARACTERS[PlayerId.player2])

    def of(self, player: PlayerId) -> Character:
        return self.player1 if player is PlayerId.player1 else self.player2

    def with_character(self, character: Character) -> "Roster":
        if character.id is PlayerId.player1:
            return Roster(player1=character, player2=self.player2)
        return Roster(player1=self.player1, player2=character)

    def as_list(self) -> list[Character]:
        return [self.player1, self.player2]


def update_character(character: Character, payload: CharacterUpdateRequest) -> Character:
    """Apply a partial update; the result is fully re-validated."""

    data = character.model_dump()
    data.update(payload.model_dump(exclude_none=True))
    return Character.model_validate(data)


def randomize_character(character: Character, *, rng: random.Random) -> Character:
    """New look, same name and id."""

    return character.model_copy(
        update={
            "hair_color": rng.choice(HAIR_COLORS),
            "skin_color": rng.choice(SKIN_COLORS),
            "outfit_color": rng.choice(OUTFIT_COLORS),
            "accessory": rng.choice(list(Accessory)),
        }
    )


def _character_key(player: PlayerId) -> str:
    return f"{CHARACTER_KEY_PREFIX}{player.value}"


def save_character(*, r: redis.Redis, character: Character) -> None:
    try:
        r.set(_character_key(character.id), character.model_dump_json())
    except redis.RedisError as e:
        logger.warning("characters: failed to persist %s: %s", character.id.value, e)


def load_character(*, r: redis.Redis, player: PlayerId) -> Character:
    try:
        raw = r.get(_character_key(player))
    except redis.RedisError as e:
        logger.warning("characters: could not load %s, using default: %s", player.value, e)
        return DEFAULT_CHARACTERS[player]
    if not raw:
        return DEFAULT_CHARACTERS[player]
    try:
        return Character.model_validate_json(raw)
    except ValidationError as e:
        logger.warning("characters: stored record for %s is invalid, using default: %s", player.value, e)
        return DEFAULT_CHARACTERS[player]


def load_roster(*, r: redis.Redis) -> Roster:
    return Roster(
        player1=load_character(r=r, player=PlayerId.player1),
        player2=load_character(r=r, player=PlayerId.player2),
    )
