from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quiz_progress import StudentQuizProgress
from app.db.models.students import Student
from app.game.leaderboard.types import (
    DateLevelRow,
    LevelTotalRow,
    StudentDateLevelRow,
    StudentTotalRow,
)


def _reward_sum():
    return func.coalesce(func.sum(StudentQuizProgress.total_reward), 0)


class LeaderboardRepo:
    @staticmethod
    async def aggregate_by_student(session: AsyncSession) -> list[StudentTotalRow]:
        total = _reward_sum().label("total")
        stmt = (
            select(Student.id, Student.name, Student.email, total)
            .select_from(StudentQuizProgress)
            .join(Student, Student.id == StudentQuizProgress.student_id)
            .group_by(Student.id, Student.name, Student.email)
            .order_by(total.desc(), Student.id.asc())
        )
        result = await session.execute(stmt)
        return [
            StudentTotalRow(student_id=int(student_id), name=name, email=email, total=int(score or 0))
            for student_id, name, email, score in result.all()
        ]

    @staticmethod
    async def aggregate_by_student_and_level(
        session: AsyncSession,
        *,
        student_id: int,
    ) -> list[LevelTotalRow]:
        stmt = (
            select(StudentQuizProgress.level, _reward_sum())
            .where(StudentQuizProgress.student_id == student_id)
            .group_by(StudentQuizProgress.level)
        )
        result = await session.execute(stmt)
        return [LevelTotalRow(level=str(level), total=int(score or 0)) for level, score in result.all()]

    @staticmethod
    async def aggregate_by_student_date_level(session: AsyncSession) -> list[StudentDateLevelRow]:
        stmt = (
            select(
                Student.id,
                Student.name,
                Student.email,
                StudentQuizProgress.quiz_date,
                StudentQuizProgress.level,
                _reward_sum(),
            )
            .select_from(StudentQuizProgress)
            .join(Student, Student.id == StudentQuizProgress.student_id)
            .group_by(
                Student.id,
                Student.name,
                Student.email,
                StudentQuizProgress.quiz_date,
                StudentQuizProgress.level,
            )
            .order_by(Student.name.asc(), Student.id.asc(), StudentQuizProgress.quiz_date.asc())
        )
        result = await session.execute(stmt)
        return [
            StudentDateLevelRow(
                student_id=int(student_id),
                name=name,
                email=email,
                quiz_date=quiz_date,
                level=str(level),
                total=int(score or 0),
            )
            for student_id, name, email, quiz_date, level, score in result.all()
        ]

    @staticmethod
    async def aggregate_by_date_level(
        session: AsyncSession,
        *,
        from_date: date | None = None,
        to_date: date | None = None,
        student_id: int | None = None,
    ) -> list[DateLevelRow]:
        stmt = select(
            StudentQuizProgress.quiz_date,
            func.lower(StudentQuizProgress.level),
            _reward_sum(),
        )
        if student_id is not None:
            stmt = stmt.where(StudentQuizProgress.student_id == student_id)
        if from_date is not None:
            stmt = stmt.where(StudentQuizProgress.quiz_date >= from_date)
        if to_date is not None:
            stmt = stmt.where(StudentQuizProgress.quiz_date <= to_date)
        stmt = stmt.group_by(
            StudentQuizProgress.quiz_date,
            func.lower(StudentQuizProgress.level),
        ).order_by(StudentQuizProgress.quiz_date.asc())

        result = await session.execute(stmt)
        return [
            DateLevelRow(quiz_date=quiz_date, level=str(level), total=int(score or 0))
            for quiz_date, level, score in result.all()
        ]
