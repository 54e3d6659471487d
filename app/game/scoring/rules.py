from __future__ import annotations

from collections.abc import Iterable

from app.game.scoring.constants import REWARD_TABLE
from app.game.scoring.levels import QuizLevel, match_level
from app.game.scoring.types import AnswerSnapshot


def calculate_reward(level: QuizLevel | str, attempt_number: int) -> int:
    """Diamonds earned when an answer turns correct on ``attempt_number``.

    Unknown level text and non-positive attempt numbers earn nothing.
    """
    resolved = match_level(level)
    if resolved is None or attempt_number < 1:
        return 0
    tiers = REWARD_TABLE[resolved]
    return tiers[min(attempt_number, len(tiers)) - 1]


def is_progress_completed(*, total_questions: int, correct_count: int) -> bool:
    return total_questions == 0 or correct_count == total_questions


def sum_earned_reward(answers: Iterable[AnswerSnapshot]) -> int:
    return sum(answer.earned_reward for answer in answers)


def count_correct(answers: Iterable[AnswerSnapshot]) -> int:
    return sum(1 for answer in answers if answer.is_correct)
