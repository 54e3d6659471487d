from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quiz_questions import QuizQuestion


class QuizQuestionsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, question_id: int) -> QuizQuestion | None:
        return await session.get(QuizQuestion, question_id)

    @staticmethod
    async def list_for_date_level(
        session: AsyncSession,
        *,
        quiz_date: date,
        level: str,
    ) -> list[QuizQuestion]:
        stmt = (
            select(QuizQuestion)
            .where(
                QuizQuestion.quiz_date == quiz_date,
                QuizQuestion.level == level,
            )
            .order_by(QuizQuestion.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count_for_date_level(
        session: AsyncSession,
        *,
        quiz_date: date,
        level: str,
    ) -> int:
        stmt = select(func.count(QuizQuestion.id)).where(
            QuizQuestion.quiz_date == quiz_date,
            QuizQuestion.level == level,
        )
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        quiz_date: date,
        level: str,
        question: str,
        options: Sequence[str],
        correct_option_index: int,
        image_url: str | None,
        now_utc: datetime,
    ) -> QuizQuestion:
        row = QuizQuestion(
            quiz_date=quiz_date,
            level=level,
            question=question,
            options=list(options),
            correct_option_index=correct_option_index,
            image_url=image_url,
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(row)
        await session.flush()
        return row

    @staticmethod
    async def update(
        session: AsyncSession,
        *,
        question_id: int,
        question: str,
        options: Sequence[str],
        correct_option_index: int,
        image_url: str | None,
        now_utc: datetime,
    ) -> QuizQuestion | None:
        row = await session.get(QuizQuestion, question_id, with_for_update=True)
        if row is None:
            return None
        row.question = question
        row.options = list(options)
        row.correct_option_index = correct_option_index
        if image_url is not None:
            row.image_url = image_url
        row.updated_at = now_utc
        await session.flush()
        return row

    @staticmethod
    async def delete(session: AsyncSession, *, question_id: int) -> bool:
        row = await session.get(QuizQuestion, question_id)
        if row is None:
            return False
        await session.delete(row)
        await session.flush()
        return True
