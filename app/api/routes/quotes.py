from __future__ import annotations

import random
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.core.security import Identity
from app.db.models.quotes import Quote
from app.db.repo.quotes_repo import QuotesRepo
from app.db.session import SessionLocal
from app.services.auth_gate import require_superadmin

router = APIRouter(prefix="/api/quotes", tags=["quotes"])


class QuoteRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)
    author: str | None = Field(default=None, max_length=255)


class QuoteResponse(BaseModel):
    id: int
    text: str
    author: str | None
    created_at: datetime | None = None


class QuoteListResponse(BaseModel):
    quotes: list[QuoteResponse]


def _quote_response(quote: Quote) -> QuoteResponse:
    return QuoteResponse(
        id=quote.id,
        text=quote.text,
        author=quote.author,
        created_at=quote.created_at,
    )


def _quote_not_found() -> HTTPException:
    return HTTPException(status_code=404, detail={"code": "E_QUOTE_NOT_FOUND"})


def _clean_text(raw: str) -> str:
    text = raw.strip()
    if not text:
        raise HTTPException(status_code=422, detail={"code": "E_QUOTE_TEXT_REQUIRED"})
    return text


@router.get("/wotd", response_model=QuoteResponse)
async def word_of_the_day() -> QuoteResponse:
    async with SessionLocal() as session:
        total = await QuotesRepo.count(session)
        if total == 0:
            raise _quote_not_found()
        quote = await QuotesRepo.get_at_offset(session, random.randrange(total))
    if quote is None:
        raise _quote_not_found()
    return _quote_response(quote)


@router.get("", response_model=QuoteListResponse)
async def list_quotes(identity: Identity = Depends(require_superadmin)) -> QuoteListResponse:
    async with SessionLocal() as session:
        quotes = await QuotesRepo.list_newest_first(session)
    return QuoteListResponse(quotes=[_quote_response(quote) for quote in quotes])


@router.post("", response_model=QuoteResponse, status_code=status.HTTP_201_CREATED)
async def create_quote(
    payload: QuoteRequest,
    identity: Identity = Depends(require_superadmin),
) -> QuoteResponse:
    text = _clean_text(payload.text)
    async with SessionLocal.begin() as session:
        quote = await QuotesRepo.create(
            session,
            text=text,
            author=payload.author,
            now_utc=datetime.now(timezone.utc),
        )
        return _quote_response(quote)


@router.put("/{quote_id}", response_model=QuoteResponse)
async def update_quote(
    quote_id: int,
    payload: QuoteRequest,
    identity: Identity = Depends(require_superadmin),
) -> QuoteResponse:
    text = _clean_text(payload.text)
    async with SessionLocal.begin() as session:
        quote = await QuotesRepo.update(session, quote_id=quote_id, text=text, author=payload.author)
        if quote is None:
            raise _quote_not_found()
        return _quote_response(quote)


@router.delete("/{quote_id}")
async def delete_quote(
    quote_id: int,
    identity: Identity = Depends(require_superadmin),
) -> dict[str, str]:
    async with SessionLocal.begin() as session:
        deleted = await QuotesRepo.delete(session, quote_id)
    if not deleted:
        raise _quote_not_found()
    return {"status": "deleted"}
