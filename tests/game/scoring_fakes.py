from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app.db.repo.quiz_progress_repo import QuizProgressRepo
from app.db.repo.quiz_questions_repo import QuizQuestionsRepo


@dataclass
class InMemoryQuizStore:
    questions: dict[int, SimpleNamespace] = field(default_factory=dict)
    progress: dict[tuple[int, date, str], SimpleNamespace] = field(default_factory=dict)
    answers: dict[tuple[int, int], SimpleNamespace] = field(default_factory=dict)
    save_calls: int = 0

    def add_question(
        self,
        *,
        question_id: int,
        quiz_date: date,
        level: str,
        correct_option_index: int = 0,
    ) -> SimpleNamespace:
        question = SimpleNamespace(
            id=question_id,
            quiz_date=quiz_date,
            level=level,
            question=f"Question {question_id}?",
            options=["a", "b", "c", "d"],
            correct_option_index=correct_option_index,
            image_url=None,
        )
        self.questions[question_id] = question
        return question

    def progress_for(self, *, student_id: int, quiz_date: date, level: str) -> SimpleNamespace | None:
        return self.progress.get((student_id, quiz_date, level))

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        store = self

        async def find_or_create(session, *, student_id, quiz_date, level):  # noqa: ANN001
            del session
            key = (student_id, quiz_date, level)
            if key not in store.progress:
                store.progress[key] = SimpleNamespace(
                    id=len(store.progress) + 1,
                    student_id=student_id,
                    quiz_date=quiz_date,
                    level=level,
                    total_reward=0,
                    completed=False,
                    updated_at=None,
                )
            return store.progress[key]

        async def ensure_answer(session, *, progress_id, question_id):  # noqa: ANN001
            del session
            store.answers.setdefault(
                (progress_id, question_id),
                SimpleNamespace(
                    id=len(store.answers) + 1,
                    question_id=question_id,
                    attempt_count=0,
                    earned_reward=0,
                    is_correct=False,
                ),
            )

        async def increment_attempt(session, *, progress_id, question_id):  # noqa: ANN001
            del session
            store.answers[(progress_id, question_id)].attempt_count += 1

        async def get_answer(session, *, progress_id, question_id):  # noqa: ANN001
            del session
            return store.answers.get((progress_id, question_id))

        async def mark_answer_correct(session, *, progress_id, question_id, reward):  # noqa: ANN001
            del session
            answer = store.answers[(progress_id, question_id)]
            if answer.is_correct:
                return False
            answer.is_correct = True
            answer.earned_reward = reward
            return True

        async def list_answers(session, *, progress_id):  # noqa: ANN001
            del session
            rows = [answer for (pid, _), answer in store.answers.items() if pid == progress_id]
            return sorted(rows, key=lambda row: row.id)

        async def save_totals(session, *, progress, total_reward, completed, now_utc: datetime):  # noqa: ANN001
            del session
            store.save_calls += 1
            progress.total_reward = total_reward
            progress.completed = completed
            progress.updated_at = now_utc
            return progress

        async def sum_total_reward_for_student(session, *, student_id):  # noqa: ANN001
            del session
            return sum(row.total_reward for key, row in store.progress.items() if key[0] == student_id)

        def _for_date_level(quiz_date: date, level: str) -> list[SimpleNamespace]:
            return [
                question
                for question in store.questions.values()
                if question.quiz_date == quiz_date and question.level == level
            ]

        async def get_by_id(session, question_id):  # noqa: ANN001
            del session
            return store.questions.get(question_id)

        async def list_for_date_level(session, *, quiz_date, level):  # noqa: ANN001
            del session
            return _for_date_level(quiz_date, level)

        async def count_for_date_level(session, *, quiz_date, level):  # noqa: ANN001
            del session
            return len(_for_date_level(quiz_date, level))

        monkeypatch.setattr(QuizProgressRepo, "find_or_create", find_or_create)
        monkeypatch.setattr(QuizProgressRepo, "ensure_answer", ensure_answer)
        monkeypatch.setattr(QuizProgressRepo, "increment_attempt", increment_attempt)
        monkeypatch.setattr(QuizProgressRepo, "get_answer", get_answer)
        monkeypatch.setattr(QuizProgressRepo, "mark_answer_correct", mark_answer_correct)
        monkeypatch.setattr(QuizProgressRepo, "list_answers", list_answers)
        monkeypatch.setattr(QuizProgressRepo, "save_totals", save_totals)
        monkeypatch.setattr(QuizProgressRepo, "sum_total_reward_for_student", sum_total_reward_for_student)
        monkeypatch.setattr(QuizQuestionsRepo, "get_by_id", get_by_id)
        monkeypatch.setattr(QuizQuestionsRepo, "list_for_date_level", list_for_date_level)
        monkeypatch.setattr(QuizQuestionsRepo, "count_for_date_level", count_for_date_level)
