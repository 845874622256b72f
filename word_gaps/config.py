from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field


PLACEHOLDER = "_"
MIN_WORD_LENGTH = 2
LEVEL_MIN = 1
LEVEL_MAX = 5
OCR_STRENGTHS = {"FAST", "BALANCED", "ACCURATE"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return max(1, int(raw))
    except ValueError:
        return default


def _env_strength() -> str:
    strength = os.getenv("WORD_GAPS_OCR_STRENGTH", "BALANCED").strip().upper()
    if strength not in OCR_STRENGTHS:
        return "BALANCED"
    return strength


@dataclass(frozen=True)
class OCRSettings:
    lang: str = field(default_factory=lambda: os.getenv("WORD_GAPS_OCR_LANG", "rus").strip() or "rus")
    strength: str = field(default_factory=_env_strength)


@dataclass(frozen=True)
class SessionLimits:
    max_sessions: int = field(default_factory=lambda: _env_int("WORD_GAPS_MAX_SESSIONS", 500))
    max_words: int = field(default_factory=lambda: _env_int("WORD_GAPS_MAX_WORDS", 200))


def configure_logging() -> None:
    level_name = os.getenv("WORD_GAPS_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
