from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True, slots=True)
class Settings:
    redis_url: str = "redis://localhost:6379/0"

    # Memory-Match: how long both faces stay up before a pair resolves.
    match_delay_s: float = 0.5
    mismatch_delay_s: float = 1.0

    # Word-Clue countdowns.
    clue_seconds: int = 60
    guess_seconds: int = 30

    log_level: str = "INFO"


def load_settings(*, env_file: Path | None = None) -> Settings:
    """Read settings from the environment.

    A `.env` file (explicit path, or the nearest one found) is loaded first
    without overriding variables that are already set.
    """

    load_dotenv(dotenv_path=env_file, override=False)
    defaults = Settings()
    return Settings(
        redis_url=os.environ.get("REDIS_URL", defaults.redis_url),
        match_delay_s=float(os.environ.get("PLAYDATE_MATCH_DELAY_S", defaults.match_delay_s)),
        mismatch_delay_s=float(os.environ.get("PLAYDATE_MISMATCH_DELAY_S", defaults.mismatch_delay_s)),
        clue_seconds=int(os.environ.get("PLAYDATE_CLUE_SECONDS", defaults.clue_seconds)),
        guess_seconds=int(os.environ.get("PLAYDATE_GUESS_SECONDS", defaults.guess_seconds)),
        log_level=os.environ.get("PLAYDATE_LOG_LEVEL", defaults.log_level).upper(),
    )
