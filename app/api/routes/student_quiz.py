from __future__ import annotations

from datetime import date, datetime, timezone

import structlog
from fastapi import APIRouter, Depends, HTTPException

from app.core.security import Identity
from app.db.session import SessionLocal
from app.game.scoring.errors import NotFoundError, ValidationError
from app.game.scoring.levels import QuizLevel, parse_level
from app.game.scoring.service import ScoringService
from app.services.auth_gate import require_student

from .student_quiz_models import (
    AnswerSubmitRequest,
    AnswerSubmitResponse,
    StudentQuizResponse,
    TotalRewardResponse,
    answer_outcome_response,
    quiz_view_response,
)

router = APIRouter(prefix="/api/student-quiz", tags=["student-quiz"])
logger = structlog.get_logger(__name__)


def _parse_level_or_422(raw_level: str) -> QuizLevel:
    try:
        return parse_level(raw_level)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_LEVEL"}) from exc


@router.get("/total", response_model=TotalRewardResponse)
async def get_total_reward(identity: Identity = Depends(require_student)) -> TotalRewardResponse:
    async with SessionLocal() as session:
        total = await ScoringService.get_total_reward(session, student_id=identity.subject_id)
    return TotalRewardResponse(total=total)


@router.post("/answer", response_model=AnswerSubmitResponse)
async def submit_answer(
    payload: AnswerSubmitRequest,
    identity: Identity = Depends(require_student),
) -> AnswerSubmitResponse:
    level = _parse_level_or_422(payload.level)
    now_utc = datetime.now(timezone.utc)
    try:
        async with SessionLocal.begin() as session:
            outcome = await ScoringService.submit_answer(
                session,
                student_id=identity.subject_id,
                quiz_date=payload.quiz_date,
                level=level,
                question_id=payload.question_id,
                selected_option=payload.selected_option,
                now_utc=now_utc,
            )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_QUESTION_NOT_FOUND"}) from exc
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_ANSWER"}) from exc

    return answer_outcome_response(outcome)


@router.get("/{quiz_date}/{level}", response_model=StudentQuizResponse)
async def get_quiz_for_student(
    quiz_date: date,
    level: str,
    identity: Identity = Depends(require_student),
) -> StudentQuizResponse:
    resolved_level = _parse_level_or_422(level)
    now_utc = datetime.now(timezone.utc)
    async with SessionLocal.begin() as session:
        view = await ScoringService.load_quiz_for_student(
            session,
            student_id=identity.subject_id,
            quiz_date=quiz_date,
            level=resolved_level,
            now_utc=now_utc,
        )
    return quiz_view_response(view)
