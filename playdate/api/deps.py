from __future__ import annotations

from playdate.arcade import Arcade, build_arcade
from playdate.config import Settings, load_settings


_ARCADE: Arcade | None = None


def init_arcade(*, settings: Settings | None = None, arcade: Arcade | None = None) -> Arcade:
    """Build the process-wide arcade once and cache it.

    Safe to call multiple times; subsequent calls return the already built instance.
    """

    global _ARCADE
    if _ARCADE is None:
        _ARCADE = arcade or build_arcade(settings=settings or load_settings())
    return _ARCADE


def reset_arcade_for_tests() -> None:
    """Drop the cached arcade, closing any live game first."""

    global _ARCADE
    if _ARCADE is not None:
        _ARCADE.leave_game()
    _ARCADE = None


def get_arcade() -> Arcade:
    if _ARCADE is None:
        raise RuntimeError("Arcade not initialized. Call init_arcade() at startup.")
    return _ARCADE

