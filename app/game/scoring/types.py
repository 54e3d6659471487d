from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, slots=True)
class AnswerSnapshot:
    question_id: int
    attempt_count: int
    earned_reward: int
    is_correct: bool


@dataclass(frozen=True, slots=True)
class ProgressSnapshot:
    progress_id: int
    student_id: int
    quiz_date: date
    level: str
    total_reward: int
    completed: bool
    answers: tuple[AnswerSnapshot, ...] = ()


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    success: bool
    blocked: bool
    total_reward: int
    completed: bool
    answers: tuple[AnswerSnapshot, ...] = ()
    message: str | None = None


@dataclass(frozen=True, slots=True)
class StudentQuestionView:
    question_id: int
    question: str
    options: tuple[str, ...]
    image_url: str | None


@dataclass(frozen=True, slots=True)
class StudentQuizView:
    questions: tuple[StudentQuestionView, ...]
    progress: ProgressSnapshot
    message: str | None = None
