from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import exists, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quiz_progress import ProgressAnswer, StudentQuizProgress


class QuizProgressRepo:
    @staticmethod
    async def get_for_update(
        session: AsyncSession,
        *,
        student_id: int,
        quiz_date: date,
        level: str,
    ) -> StudentQuizProgress | None:
        stmt = (
            select(StudentQuizProgress)
            .where(
                StudentQuizProgress.student_id == student_id,
                StudentQuizProgress.quiz_date == quiz_date,
                StudentQuizProgress.level == level,
            )
            .with_for_update()
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def find_or_create(
        session: AsyncSession,
        *,
        student_id: int,
        quiz_date: date,
        level: str,
    ) -> StudentQuizProgress:
        """Returns the row for the key, locked for the rest of the transaction."""
        stmt = (
            pg_insert(StudentQuizProgress)
            .values(
                student_id=student_id,
                quiz_date=quiz_date,
                level=level,
                total_reward=0,
                completed=False,
            )
            .on_conflict_do_nothing(
                index_elements=[
                    StudentQuizProgress.student_id,
                    StudentQuizProgress.quiz_date,
                    StudentQuizProgress.level,
                ]
            )
        )
        await session.execute(stmt)
        progress = await QuizProgressRepo.get_for_update(
            session,
            student_id=student_id,
            quiz_date=quiz_date,
            level=level,
        )
        if progress is None:
            raise RuntimeError("progress row missing after upsert")
        return progress

    @staticmethod
    async def ensure_answer(
        session: AsyncSession,
        *,
        progress_id: int,
        question_id: int,
    ) -> None:
        stmt = (
            pg_insert(ProgressAnswer)
            .values(
                progress_id=progress_id,
                question_id=question_id,
                attempt_count=0,
                earned_reward=0,
                is_correct=False,
            )
            .on_conflict_do_nothing(
                index_elements=[ProgressAnswer.progress_id, ProgressAnswer.question_id]
            )
        )
        await session.execute(stmt)

    @staticmethod
    async def increment_attempt(
        session: AsyncSession,
        *,
        progress_id: int,
        question_id: int,
    ) -> None:
        stmt = (
            update(ProgressAnswer)
            .where(
                ProgressAnswer.progress_id == progress_id,
                ProgressAnswer.question_id == question_id,
            )
            .values(attempt_count=ProgressAnswer.attempt_count + 1)
        )
        await session.execute(stmt)

    @staticmethod
    async def get_answer(
        session: AsyncSession,
        *,
        progress_id: int,
        question_id: int,
    ) -> ProgressAnswer | None:
        stmt = (
            select(ProgressAnswer)
            .where(
                ProgressAnswer.progress_id == progress_id,
                ProgressAnswer.question_id == question_id,
            )
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def mark_answer_correct(
        session: AsyncSession,
        *,
        progress_id: int,
        question_id: int,
        reward: int,
    ) -> bool:
        stmt = (
            update(ProgressAnswer)
            .where(
                ProgressAnswer.progress_id == progress_id,
                ProgressAnswer.question_id == question_id,
                ProgressAnswer.is_correct.is_(False),
            )
            .values(is_correct=True, earned_reward=reward)
        )
        result = await session.execute(stmt)
        return int(result.rowcount or 0) > 0

    @staticmethod
    async def list_answers(session: AsyncSession, *, progress_id: int) -> list[ProgressAnswer]:
        stmt = (
            select(ProgressAnswer)
            .where(ProgressAnswer.progress_id == progress_id)
            .order_by(ProgressAnswer.id.asc())
            .execution_options(populate_existing=True)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def save_totals(
        session: AsyncSession,
        *,
        progress: StudentQuizProgress,
        total_reward: int,
        completed: bool,
        now_utc: datetime,
    ) -> StudentQuizProgress:
        progress.total_reward = total_reward
        progress.completed = completed
        progress.updated_at = now_utc
        await session.flush()
        return progress

    @staticmethod
    async def sum_total_reward_for_student(session: AsyncSession, *, student_id: int) -> int:
        stmt = select(func.coalesce(func.sum(StudentQuizProgress.total_reward), 0)).where(
            StudentQuizProgress.student_id == student_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def has_answers_for_question(session: AsyncSession, *, question_id: int) -> bool:
        stmt = select(exists().where(ProgressAnswer.question_id == question_id))
        result = await session.execute(stmt)
        return bool(result.scalar_one())
