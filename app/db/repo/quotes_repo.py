from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.quotes import Quote


class QuotesRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, quote_id: int) -> Quote | None:
        return await session.get(Quote, quote_id)

    @staticmethod
    async def list_newest_first(session: AsyncSession) -> list[Quote]:
        stmt = select(Quote).order_by(Quote.created_at.desc(), Quote.id.desc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def count(session: AsyncSession) -> int:
        result = await session.execute(select(func.count(Quote.id)))
        return int(result.scalar_one() or 0)

    @staticmethod
    async def get_at_offset(session: AsyncSession, offset: int) -> Quote | None:
        stmt = select(Quote).order_by(Quote.id.asc()).offset(offset).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        session: AsyncSession,
        *,
        text: str,
        author: str | None,
        now_utc: datetime,
    ) -> Quote:
        quote = Quote(text=text, author=author, created_at=now_utc)
        session.add(quote)
        await session.flush()
        return quote

    @staticmethod
    async def update(
        session: AsyncSession,
        *,
        quote_id: int,
        text: str | None,
        author: str | None,
    ) -> Quote | None:
        quote = await session.get(Quote, quote_id, with_for_update=True)
        if quote is None:
            return None
        if text is not None:
            quote.text = text
        quote.author = author
        await session.flush()
        return quote

    @staticmethod
    async def delete(session: AsyncSession, quote_id: int) -> bool:
        quote = await session.get(Quote, quote_id)
        if quote is None:
            return False
        await session.delete(quote)
        await session.flush()
        return True
