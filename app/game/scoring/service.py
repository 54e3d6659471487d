from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quiz_progress import ProgressAnswer, StudentQuizProgress
from app.db.repo.quiz_progress_repo import QuizProgressRepo
from app.db.repo.quiz_questions_repo import QuizQuestionsRepo
from app.game.scoring.constants import BLOCKED_MESSAGE, EMPTY_QUIZ_MESSAGE
from app.game.scoring.errors import QuestionNotFoundError, ValidationError
from app.game.scoring.levels import QuizLevel, match_level
from app.game.scoring.rules import (
    calculate_reward,
    count_correct,
    is_progress_completed,
    sum_earned_reward,
)
from app.game.scoring.types import (
    AnswerOutcome,
    AnswerSnapshot,
    ProgressSnapshot,
    StudentQuestionView,
    StudentQuizView,
)

logger = structlog.get_logger(__name__)


class ScoringService:
    @staticmethod
    def _answer_snapshot(answer: ProgressAnswer) -> AnswerSnapshot:
        return AnswerSnapshot(
            question_id=int(answer.question_id),
            attempt_count=int(answer.attempt_count or 0),
            earned_reward=int(answer.earned_reward or 0),
            is_correct=bool(answer.is_correct),
        )

    @staticmethod
    def _progress_snapshot(
        progress: StudentQuizProgress,
        answers: Sequence[AnswerSnapshot],
    ) -> ProgressSnapshot:
        return ProgressSnapshot(
            progress_id=progress.id,
            student_id=progress.student_id,
            quiz_date=progress.quiz_date,
            level=progress.level,
            total_reward=int(progress.total_reward or 0),
            completed=bool(progress.completed),
            answers=tuple(answers),
        )

    @staticmethod
    async def _load_answers(session: AsyncSession, *, progress_id: int) -> tuple[AnswerSnapshot, ...]:
        rows = await QuizProgressRepo.list_answers(session, progress_id=progress_id)
        return tuple(ScoringService._answer_snapshot(row) for row in rows)

    @staticmethod
    async def record_answer(
        session: AsyncSession,
        *,
        student_id: int,
        quiz_date: date,
        level: QuizLevel,
        question_id: int,
        is_correct: bool,
        now_utc: datetime,
    ) -> AnswerOutcome:
        progress = await QuizProgressRepo.find_or_create(
            session,
            student_id=student_id,
            quiz_date=quiz_date,
            level=level.value,
        )
        if progress.completed:
            logger.info(
                "answer_blocked_quiz_completed",
                student_id=student_id,
                quiz_date=quiz_date.isoformat(),
                level=level.value,
                question_id=question_id,
            )
            return AnswerOutcome(
                success=False,
                blocked=True,
                total_reward=int(progress.total_reward or 0),
                completed=True,
                answers=await ScoringService._load_answers(session, progress_id=progress.id),
                message=BLOCKED_MESSAGE,
            )

        await QuizProgressRepo.ensure_answer(session, progress_id=progress.id, question_id=question_id)
        await QuizProgressRepo.increment_attempt(
            session,
            progress_id=progress.id,
            question_id=question_id,
        )

        # Reward is computed from the stored counter, not from a copy read before the increment.
        answer = await QuizProgressRepo.get_answer(
            session,
            progress_id=progress.id,
            question_id=question_id,
        )
        if answer is None:
            raise RuntimeError("answer row missing after increment")

        awarded: int | None = None
        if is_correct and not answer.is_correct:
            awarded = calculate_reward(level, int(answer.attempt_count))
            await QuizProgressRepo.mark_answer_correct(
                session,
                progress_id=progress.id,
                question_id=question_id,
                reward=awarded,
            )

        answers = await ScoringService._load_answers(session, progress_id=progress.id)
        total_questions = await QuizQuestionsRepo.count_for_date_level(
            session,
            quiz_date=quiz_date,
            level=level.value,
        )
        total_reward = sum_earned_reward(answers)
        completed = is_progress_completed(
            total_questions=total_questions,
            correct_count=count_correct(answers),
        )
        await QuizProgressRepo.save_totals(
            session,
            progress=progress,
            total_reward=total_reward,
            completed=completed,
            now_utc=now_utc,
        )

        logger.info(
            "answer_recorded",
            student_id=student_id,
            quiz_date=quiz_date.isoformat(),
            level=level.value,
            question_id=question_id,
            attempt_count=int(answer.attempt_count),
            is_correct=is_correct,
            awarded=awarded,
            total_reward=total_reward,
            completed=completed,
        )
        return AnswerOutcome(
            success=True,
            blocked=False,
            total_reward=total_reward,
            completed=completed,
            answers=answers,
        )

    @staticmethod
    async def submit_answer(
        session: AsyncSession,
        *,
        student_id: int,
        quiz_date: date,
        level: QuizLevel,
        question_id: int,
        selected_option: int,
        now_utc: datetime,
    ) -> AnswerOutcome:
        question = await QuizQuestionsRepo.get_by_id(session, question_id)
        if (
            question is None
            or question.quiz_date != quiz_date
            or match_level(question.level) is not level
        ):
            raise QuestionNotFoundError(f"question {question_id} is not part of {quiz_date} {level.value}")

        options_count = len(question.options or ())
        if selected_option < 0 or selected_option >= options_count:
            raise ValidationError(f"selected_option must be in range 0..{options_count - 1}")

        return await ScoringService.record_answer(
            session,
            student_id=student_id,
            quiz_date=quiz_date,
            level=level,
            question_id=question_id,
            is_correct=selected_option == question.correct_option_index,
            now_utc=now_utc,
        )

    @staticmethod
    async def load_quiz_for_student(
        session: AsyncSession,
        *,
        student_id: int,
        quiz_date: date,
        level: QuizLevel,
        now_utc: datetime,
    ) -> StudentQuizView:
        questions = await QuizQuestionsRepo.list_for_date_level(
            session,
            quiz_date=quiz_date,
            level=level.value,
        )
        progress = await QuizProgressRepo.find_or_create(
            session,
            student_id=student_id,
            quiz_date=quiz_date,
            level=level.value,
        )

        message = None
        if not questions:
            message = EMPTY_QUIZ_MESSAGE
            if not progress.completed:
                await QuizProgressRepo.save_totals(
                    session,
                    progress=progress,
                    total_reward=int(progress.total_reward or 0),
                    completed=True,
                    now_utc=now_utc,
                )
                logger.info(
                    "empty_quiz_marked_completed",
                    student_id=student_id,
                    quiz_date=quiz_date.isoformat(),
                    level=level.value,
                )

        answers = await ScoringService._load_answers(session, progress_id=progress.id)
        return StudentQuizView(
            questions=tuple(
                StudentQuestionView(
                    question_id=question.id,
                    question=question.question,
                    options=tuple(question.options or ()),
                    image_url=question.image_url,
                )
                for question in questions
            ),
            progress=ScoringService._progress_snapshot(progress, answers),
            message=message,
        )

    @staticmethod
    async def get_total_reward(session: AsyncSession, *, student_id: int) -> int:
        return await QuizProgressRepo.sum_total_reward_for_student(session, student_id=student_id)
