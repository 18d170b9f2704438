"""
Runtime configuration, read from environment variables.

Entry points load a ``.env`` file from the working directory first (python-dotenv),
so every value below can live there as well.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .engine.state import MAX_WALLS_PER_PLAYER

DEFAULT_LLM_MODEL = "gpt-4o-mini"


def _int_var(env: Mapping[str, str], name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    walls_per_player: int = MAX_WALLS_PER_PLAYER
    log_level: str = "INFO"
    llm_model: str = DEFAULT_LLM_MODEL
    llm_max_attempts: int = 3

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if env is None else env
        level = env.get("QUORIDOR_LOG_LEVEL", "INFO").strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"QUORIDOR_LOG_LEVEL is not a logging level: {level!r}")
        return Settings(
            walls_per_player=_int_var(env, "QUORIDOR_WALLS", MAX_WALLS_PER_PLAYER),
            log_level=level,
            llm_model=env.get("OPENAI_MODEL") or DEFAULT_LLM_MODEL,
            llm_max_attempts=_int_var(env, "LLM_MAX_ATTEMPTS", 3, minimum=1),
        )
