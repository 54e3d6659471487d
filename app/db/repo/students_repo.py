from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.students import Student


class StudentsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, student_id: int) -> Student | None:
        return await session.get(Student, student_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, student_id: int) -> Student | None:
        stmt = select(Student).where(Student.id == student_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> Student | None:
        stmt = select(Student).where(func.lower(Student.email) == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Student]:
        stmt = select(Student).order_by(Student.created_at.desc(), Student.id.desc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        name: str,
        email: str,
        phone: str,
        dob: str,
        gender: str,
        class_name: str,
        password_hash: str,
        now_utc: datetime,
    ) -> Student:
        student = Student(
            name=name,
            email=email.strip().lower(),
            phone=phone,
            dob=dob,
            gender=gender,
            class_name=class_name,
            password_hash=password_hash,
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(student)
        await session.flush()
        return student

    @staticmethod
    async def delete(session: AsyncSession, student_id: int) -> bool:
        student = await session.get(Student, student_id)
        if student is None:
            return False
        await session.delete(student)
        await session.flush()
        return True
