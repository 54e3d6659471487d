from __future__ import annotations

from enum import Enum

from app.game.scoring.errors import InvalidLevelError


class QuizLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


LEVEL_ORDER: tuple[QuizLevel, ...] = (
    QuizLevel.BEGINNER,
    QuizLevel.INTERMEDIATE,
    QuizLevel.ADVANCED,
)

# Legacy rows carry free text such as "Beginner" or "advance".
_LEVEL_PREFIXES: tuple[tuple[str, QuizLevel], ...] = (
    ("begin", QuizLevel.BEGINNER),
    ("inter", QuizLevel.INTERMEDIATE),
    ("adv", QuizLevel.ADVANCED),
)


def match_level(raw: str | QuizLevel | None) -> QuizLevel | None:
    if isinstance(raw, QuizLevel):
        return raw
    if raw is None:
        return None
    normalized = raw.strip().lower()
    if not normalized:
        return None
    for prefix, level in _LEVEL_PREFIXES:
        if normalized.startswith(prefix):
            return level
    return None


def parse_level(raw: str | QuizLevel | None) -> QuizLevel:
    level = match_level(raw)
    if level is None:
        raise InvalidLevelError(f"unknown quiz level: {raw!r}")
    return level
