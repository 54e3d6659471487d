from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.admins import Admin


class AdminsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, admin_id: int) -> Admin | None:
        return await session.get(Admin, admin_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, admin_id: int) -> Admin | None:
        stmt = select(Admin).where(Admin.id == admin_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(session: AsyncSession, email: str) -> Admin | None:
        stmt = select(Admin).where(func.lower(Admin.email) == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Admin]:
        stmt = select(Admin).order_by(Admin.created_at.desc(), Admin.id.desc())
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
        password_hash: str,
        role: str,
        now_utc: datetime,
    ) -> Admin:
        admin = Admin(
            name=name,
            email=email.strip().lower(),
            phone=phone,
            dob=dob,
            gender=gender,
            password_hash=password_hash,
            role=role,
            created_at=now_utc,
            updated_at=now_utc,
        )
        session.add(admin)
        await session.flush()
        return admin

    @staticmethod
    async def delete(session: AsyncSession, admin_id: int) -> bool:
        admin = await session.get(Admin, admin_id)
        if admin is None:
            return False
        await session.delete(admin)
        await session.flush()
        return True
