from __future__ import annotations

from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import Identity
from app.db.models.quiz_questions import QuizQuestion
from app.db.repo.quiz_progress_repo import QuizProgressRepo
from app.db.repo.quiz_questions_repo import QuizQuestionsRepo
from app.db.session import SessionLocal
from app.game.scoring.errors import ValidationError
from app.game.scoring.levels import QuizLevel, parse_level
from app.services.auth_gate import require_superadmin

router = APIRouter(prefix="/api/quiz", tags=["quiz-admin"])
logger = structlog.get_logger(__name__)

OPTIONS_PER_QUESTION = 4


class QuestionContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1)
    options: list[str] = Field(min_length=OPTIONS_PER_QUESTION, max_length=OPTIONS_PER_QUESTION)
    correct_option_index: int = Field(ge=0, lt=OPTIONS_PER_QUESTION, alias="correctIndex")
    image_url: str | None = Field(default=None, alias="imageUrl", max_length=2048)

    @field_validator("options")
    @classmethod
    def _options_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [option.strip() for option in value]
        if any(not option for option in cleaned):
            raise ValueError("options must not be blank")
        return cleaned


class QuestionCreateRequest(QuestionContent):
    quiz_date: date = Field(alias="date")
    level: str = Field(min_length=1, max_length=32)


class QuestionAdminResponse(BaseModel):
    id: int
    quiz_date: date
    level: str
    question: str
    options: list[str]
    correct_option_index: int
    image_url: str | None = None


class QuestionListResponse(BaseModel):
    questions: list[QuestionAdminResponse]


def _question_response(row: QuizQuestion) -> QuestionAdminResponse:
    return QuestionAdminResponse(
        id=row.id,
        quiz_date=row.quiz_date,
        level=row.level,
        question=row.question,
        options=list(row.options),
        correct_option_index=row.correct_option_index,
        image_url=row.image_url,
    )


async def _ensure_not_answered(session: AsyncSession, question_id: int) -> None:
    if await QuizProgressRepo.has_answers_for_question(session, question_id=question_id):
        raise HTTPException(status_code=409, detail={"code": "E_QUESTION_ALREADY_ANSWERED"})


def _parse_level_or_422(raw_level: str) -> QuizLevel:
    try:
        return parse_level(raw_level)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_LEVEL"}) from exc


@router.get("/{quiz_date}/{level}", response_model=QuestionListResponse)
async def list_questions(
    quiz_date: date,
    level: str,
    identity: Identity = Depends(require_superadmin),
) -> QuestionListResponse:
    resolved_level = _parse_level_or_422(level)
    async with SessionLocal() as session:
        rows = await QuizQuestionsRepo.list_for_date_level(
            session,
            quiz_date=quiz_date,
            level=resolved_level.value,
        )
    return QuestionListResponse(questions=[_question_response(row) for row in rows])


@router.post("", response_model=QuestionAdminResponse, status_code=status.HTTP_201_CREATED)
async def create_question(
    payload: QuestionCreateRequest,
    identity: Identity = Depends(require_superadmin),
) -> QuestionAdminResponse:
    resolved_level = _parse_level_or_422(payload.level)
    async with SessionLocal.begin() as session:
        row = await QuizQuestionsRepo.create(
            session,
            quiz_date=payload.quiz_date,
            level=resolved_level.value,
            question=payload.question,
            options=payload.options,
            correct_option_index=payload.correct_option_index,
            image_url=payload.image_url,
            now_utc=datetime.now(timezone.utc),
        )
        response = _question_response(row)
    logger.info("quiz_question_created", question_id=response.id, created_by=identity.subject_id)
    return response


@router.put("/{question_id}", response_model=QuestionAdminResponse)
async def update_question(
    question_id: int,
    payload: QuestionContent,
    identity: Identity = Depends(require_superadmin),
) -> QuestionAdminResponse:
    async with SessionLocal.begin() as session:
        await _ensure_not_answered(session, question_id)
        row = await QuizQuestionsRepo.update(
            session,
            question_id=question_id,
            question=payload.question,
            options=payload.options,
            correct_option_index=payload.correct_option_index,
            image_url=payload.image_url,
            now_utc=datetime.now(timezone.utc),
        )
        if row is None:
            raise HTTPException(status_code=404, detail={"code": "E_QUESTION_NOT_FOUND"})
        response = _question_response(row)
    logger.info("quiz_question_updated", question_id=question_id, updated_by=identity.subject_id)
    return response


@router.delete("/{question_id}")
async def delete_question(
    question_id: int,
    identity: Identity = Depends(require_superadmin),
) -> dict[str, str]:
    async with SessionLocal.begin() as session:
        await _ensure_not_answered(session, question_id)
        deleted = await QuizQuestionsRepo.delete(session, question_id=question_id)
    if not deleted:
        raise HTTPException(status_code=404, detail={"code": "E_QUESTION_NOT_FOUND"})
    logger.info("quiz_question_deleted", question_id=question_id, deleted_by=identity.subject_id)
    return {"status": "deleted"}
