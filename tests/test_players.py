from __future__ import annotations

import random

import fakeredis
import pytest
from pydantic import ValidationError

from playdate.api.models import Accessory, CharacterUpdateRequest, PlayerId
from playdate.players import (
    CHARACTER_KEY_PREFIX,
    DEFAULT_CHARACTERS,
    HAIR_COLORS,
    Roster,
    load_character,
    load_roster,
    randomize_character,
    save_character,
    update_character,
)


def test_load_roster_defaults_when_empty() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    roster = load_roster(r=r)
    assert roster == Roster.default()
    assert roster.of(PlayerId.player2).name == "Player 2"


def test_save_and_load_round_trip() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    changed = update_character(DEFAULT_CHARACTERS[PlayerId.player1], CharacterUpdateRequest(name="Mina"))

    save_character(r=r, character=changed)

    assert r.exists(f"{CHARACTER_KEY_PREFIX}player1")
    assert load_character(r=r, player=PlayerId.player1).name == "Mina"
    assert load_character(r=r, player=PlayerId.player2) == DEFAULT_CHARACTERS[PlayerId.player2]


def test_invalid_stored_record_falls_back_to_default() -> None:
    r = fakeredis.FakeRedis(decode_responses=True)
    r.set(f"{CHARACTER_KEY_PREFIX}player2", '{"id": "player2", "name": ""}')
    assert load_character(r=r, player=PlayerId.player2) == DEFAULT_CHARACTERS[PlayerId.player2]


def test_partial_update_keeps_other_fields() -> None:
    base = DEFAULT_CHARACTERS[PlayerId.player2]
    updated = update_character(base, CharacterUpdateRequest(accessory=Accessory.bowtie, outfit_color="#123abc"))

    assert updated.accessory == Accessory.bowtie
    assert updated.outfit_color == "#123abc"
    assert updated.name == base.name
    assert updated.id == PlayerId.player2


@pytest.mark.parametrize(
    "payload",
    [{"name": ""}, {"name": "A" * 13}, {"hair_color": "purple"}],
)
def test_update_request_validates(payload: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        CharacterUpdateRequest(**payload)


def test_randomize_keeps_identity() -> None:
    base = DEFAULT_CHARACTERS[PlayerId.player1]
    rolled = randomize_character(base, rng=random.Random(9))

    assert rolled.id == base.id
    assert rolled.name == base.name
    assert rolled.hair_color in HAIR_COLORS


def test_roster_with_character_replaces_one_seat() -> None:
    roster = Roster.default()
    renamed = DEFAULT_CHARACTERS[PlayerId.player2].model_copy(update={"name": "Sam"})

    updated = roster.with_character(renamed)

    assert updated.player1 == roster.player1
    assert updated.player2.name == "Sam"
    assert [c.id for c in updated.as_list()] == [PlayerId.player1, PlayerId.player2]
