from __future__ import annotations

import logging
import random
from collections.abc import Callable
from functools import partial
from typing import Any

import redis

from playdate.api.models import (
    Character,
    CharacterUpdateRequest,
    GameInfo,
    GameType,
    GameView,
    PlayerId,
    SessionState,
)
from playdate.config import Settings
from playdate.core.driver import EngineDriver, ExportedFile
from playdate.core.timers import AsyncioScheduler, Scheduler
from playdate.engines import canvas, memory_match, word_clue
from playdate.infra.redis_client import create_redis
from playdate.players import Roster, load_roster, randomize_character, save_character, update_character
from playdate.session_store import RedisSessionPersistence, SessionStore
from playdate.surfaces import MemorySurface, encode_data_url
from playdate.websocket_hub import hub

logger = logging.getLogger(__name__)


GAME_CATALOG: tuple[GameInfo, ...] = (
    GameInfo(
        id=GameType.memory_match,
        name="Memory Match",
        description="Test your memory by matching cards together. Take turns and see who has the better memory!",
        difficulty="Easy",
    ),
    GameInfo(
        id=GameType.word_guess,
        name="Word Whispers",
        description="One player describes a word without saying it, while the other tries to guess. "
        "Switch roles and collect points!",
        difficulty="Medium",
    ),
    GameInfo(
        id=GameType.draw_together,
        name="Sketch Together",
        description="Work together to create a drawing. One player starts, the other continues, "
        "creating a unique masterpiece!",
        difficulty="Hard",
    ),
)

GAME_ACTIONS: dict[GameType, frozenset[str]] = {
    GameType.memory_match: frozenset({"flip", "restart"}),
    GameType.word_guess: frozenset({"start_round", "submit_clue", "submit_guess", "next_round", "restart"}),
    GameType.draw_together: frozenset({"save", "clear", "navigate", "download", "stroke"}),
}


def _require_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' is required")
    return value


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    return value


class Arcade:
    """The shell around the engines.

    Owns the session store and the character roster, and at most one live
    engine driver. Selecting a game (or leaving) closes the outgoing driver
    unconditionally, cancelling its timers.
    """

    def __init__(
        self,
        *,
        session: SessionStore,
        roster: Roster,
        settings: Settings | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
        r: redis.Redis | None = None,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self.session = session
        self.roster = roster
        self.settings = settings or Settings()
        self.live: EngineDriver[Any, Any] | None = None

        self._scheduler = scheduler or AsyncioScheduler()
        self._rng = rng or random.Random()
        self._r = r
        self._on_change = on_change

        self.session.subscribe(lambda _state: self._notify("session_updated"))

    # -- characters ---------------------------------------------------------

    def update_character(self, player: PlayerId, payload: CharacterUpdateRequest) -> Character:
        return self._store_character(update_character(self.roster.of(player), payload))

    def randomize_character(self, player: PlayerId) -> Character:
        return self._store_character(randomize_character(self.roster.of(player), rng=self._rng))

    def _store_character(self, character: Character) -> Character:
        # Engines already running keep the records they were started with.
        self.roster = self.roster.with_character(character)
        if self._r is not None:
            save_character(r=self._r, character=character)
        self._notify("characters_updated")
        return character

    # -- games --------------------------------------------------------------

    def select_game(self, game_type: GameType | str) -> EngineDriver[Any, Any]:
        try:
            gt = GameType(game_type)
        except ValueError as e:
            raise ValueError(f"Unknown game: {game_type}") from e

        self.leave_game()
        self.live = self._build_driver(gt)
        logger.info("arcade: started %s", gt.value)
        self._notify("game_updated")
        return self.live

    def leave_game(self) -> None:
        if self.live is None:
            return
        logger.info("arcade: leaving %s", self.live.game_type.value)
        self.live.close()
        self.live = None
        self._notify("game_updated")

    def require_live(self) -> EngineDriver[Any, Any]:
        if self.live is None:
            raise LookupError("No game in progress")
        return self.live

    def dispatch_action(self, action: str, payload: dict[str, Any] | None = None) -> EngineDriver[Any, Any]:
        """Entry point for the UI: translate a named action into an engine event and apply it.

        Unknown actions and malformed payloads raise ValueError. Moves that are
        merely not allowed right now (wrong phase, face-up card, empty clue)
        are silently ignored by the engine.
        """

        driver = self.require_live()
        if action not in GAME_ACTIONS[driver.game_type]:
            allowed = ",".join(sorted(GAME_ACTIONS[driver.game_type]))
            raise ValueError(f"Action '{action}' not available in {driver.game_type.value} (allowed: {allowed})")

        event = self._event_for(driver, action, payload or {})
        driver.dispatch(event)
        return driver

    def upload_surface(self, image: bytes) -> None:
        driver = self.require_live()
        if not isinstance(driver.surface, MemorySurface):
            raise ValueError(f"{driver.game_type.value} has no drawing surface")
        driver.surface.upload(image)

    def download_surface(self) -> ExportedFile:
        driver = self.dispatch_action("download")
        assert driver.last_export is not None
        return driver.last_export

    def game_view(self) -> GameView:
        driver = self.require_live()
        if driver.game_type == GameType.draw_together:
            state = driver.state.model_dump(mode="json", exclude={"gallery"})
            state["gallery_size"] = len(driver.state.gallery)
            image = driver.surface.snapshot() if driver.surface is not None else b""
            state["surface"] = encode_data_url(image) if image else None
        else:
            state = driver.state.model_dump(mode="json")
        return GameView(
            game_type=driver.game_type,
            state=state,
            dialogue=list(driver.dialogue),
            characters=list(driver.characters),
            timer_pending=driver.timer_pending,
        )

    def session_state(self) -> SessionState:
        return self.session.state

    # -- wiring -------------------------------------------------------------

    def _build_driver(self, game_type: GameType) -> EngineDriver[Any, Any]:
        common: dict[str, Any] = {
            "game_type": game_type,
            "scheduler": self._scheduler,
            "on_score_update": self.session.apply_score,
            "characters": self.roster.as_list(),
            "on_change": lambda: self._notify("game_updated"),
        }

        if game_type == GameType.memory_match:
            mm_rules = memory_match.MemoryMatchRules(
                match_delay_s=self.settings.match_delay_s,
                mismatch_delay_s=self.settings.mismatch_delay_s,
            )
            return EngineDriver(
                opening=memory_match.start(rng=self._rng, rules=mm_rules),
                transition=partial(memory_match.transition, rng=self._rng, rules=mm_rules),
                **common,
            )

        if game_type == GameType.word_guess:
            wc_rules = word_clue.WordClueRules(
                clue_seconds=self.settings.clue_seconds,
                guess_seconds=self.settings.guess_seconds,
            )
            return EngineDriver(
                opening=word_clue.start(rng=self._rng, rules=wc_rules),
                transition=partial(word_clue.transition, rng=self._rng, rules=wc_rules),
                **common,
            )

        cv_rules = canvas.CanvasRules()
        return EngineDriver(
            opening=canvas.start(rng=self._rng, rules=cv_rules),
            transition=partial(canvas.transition, rng=self._rng, rules=cv_rules),
            surface=MemorySurface(),
            **common,
        )

    @staticmethod
    def _event_for(driver: EngineDriver[Any, Any], action: str, payload: dict[str, Any]) -> object:
        gt = driver.game_type

        if gt == GameType.memory_match:
            if action == "flip":
                return memory_match.Flip(card_id=_require_int(payload, "card_id"))
            return memory_match.Restart()

        if gt == GameType.word_guess:
            if action == "start_round":
                return word_clue.StartRound()
            if action == "submit_clue":
                return word_clue.SubmitClue(text=_require_str(payload, "text"))
            if action == "submit_guess":
                return word_clue.SubmitGuess(text=_require_str(payload, "text"))
            if action == "next_round":
                return word_clue.NextRound()
            return word_clue.RestartGame()

        if action == "save":
            assert driver.surface is not None
            return canvas.Save(snapshot=driver.surface.snapshot())
        if action == "clear":
            return canvas.Clear()
        if action == "navigate":
            direction = _require_str(payload, "direction")
            if direction not in ("prev", "next"):
                raise ValueError("'direction' must be 'prev' or 'next'")
            return canvas.Navigate(direction=direction)  # type: ignore[arg-type]
        if action == "download":
            return canvas.Download()
        return canvas.SetStroke(color=_require_str(payload, "color"), width=_require_int(payload, "width"))

    def _notify(self, kind: str) -> None:
        if self._on_change is not None:
            self._on_change(kind)


def build_arcade(
    *,
    settings: Settings,
    r: redis.Redis | None = None,
    scheduler: Scheduler | None = None,
    rng: random.Random | None = None,
) -> Arcade:
    """Wire an Arcade against Redis, broadcasting every change to connected UIs."""

    client = r if r is not None else create_redis(settings.redis_url)
    session = SessionStore.open(persistence=RedisSessionPersistence(r=client))
    return Arcade(
        session=session,
        roster=load_roster(r=client),
        settings=settings,
        scheduler=scheduler,
        rng=rng,
        r=client,
        on_change=lambda kind: hub.broadcast_soon({"type": kind}),
    )
