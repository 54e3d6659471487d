from __future__ import annotations

from datetime import date

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from app.core.config import get_settings
from app.core.security import Identity
from app.db.session import SessionLocal
from app.game.leaderboard.constants import REPORT_CONTENT_TYPE, REPORT_FILENAME
from app.game.leaderboard.errors import StudentNotFoundError
from app.game.leaderboard.service import LeaderboardService
from app.game.leaderboard.types import LeaderboardEntry
from app.services.auth_gate import get_current_identity

router = APIRouter(prefix="/api/leaderboard", tags=["leaderboard"])
logger = structlog.get_logger(__name__)


class LeaderboardEntryResponse(BaseModel):
    rank: int = Field(ge=1)
    student_id: int
    name: str
    email: str
    score: int = Field(ge=0)


class LeaderboardResponse(BaseModel):
    top3: list[LeaderboardEntryResponse]
    total_count: int = Field(ge=0)
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    page_list: list[LeaderboardEntryResponse]


class SummaryStudentResponse(BaseModel):
    id: int
    name: str
    email: str


class LevelTotalsResponse(BaseModel):
    beginner: int = Field(ge=0)
    intermediate: int = Field(ge=0)
    advanced: int = Field(ge=0)


class StudentSummaryResponse(BaseModel):
    student: SummaryStudentResponse
    levels: LevelTotalsResponse
    overall: int = Field(ge=0)
    rank: int | None = None


class ChartSeriesResponse(BaseModel):
    dates: list[date]
    beginner: list[int]
    intermediate: list[int]
    advanced: list[int]
    totals: LevelTotalsResponse


def _entry_response(entry: LeaderboardEntry) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        rank=entry.rank,
        student_id=entry.student_id,
        name=entry.name,
        email=entry.email,
        score=entry.score,
    )


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    page: int = Query(default=1),
    per_page: int | None = Query(default=None, alias="perPage"),
    identity: Identity = Depends(get_current_identity),
) -> LeaderboardResponse:
    async with SessionLocal() as session:
        result = await LeaderboardService.rank_students(
            session,
            page=page,
            per_page=per_page,
            default_per_page=get_settings().leaderboard_default_per_page,
        )
    return LeaderboardResponse(
        top3=[_entry_response(entry) for entry in result.top3],
        total_count=result.total_count,
        page=result.page,
        per_page=result.per_page,
        page_list=[_entry_response(entry) for entry in result.page_list],
    )


@router.get("/summary/{student_id}", response_model=StudentSummaryResponse)
async def get_student_summary(
    student_id: int,
    identity: Identity = Depends(get_current_identity),
) -> StudentSummaryResponse:
    try:
        async with SessionLocal() as session:
            summary = await LeaderboardService.summarize_student(session, student_id=student_id)
    except StudentNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_STUDENT_NOT_FOUND"}) from exc

    return StudentSummaryResponse(
        student=SummaryStudentResponse(id=summary.student_id, name=summary.name, email=summary.email),
        levels=LevelTotalsResponse(
            beginner=summary.levels.beginner,
            intermediate=summary.levels.intermediate,
            advanced=summary.levels.advanced,
        ),
        overall=summary.overall,
        rank=summary.rank,
    )


@router.get("/report")
async def download_report(identity: Identity = Depends(get_current_identity)) -> Response:
    async with SessionLocal() as session:
        payload = await LeaderboardService.build_report(session)
    logger.info("leaderboard_report_downloaded", requested_by=identity.subject_id, role=identity.role)
    return Response(
        content=payload,
        media_type=REPORT_CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename={REPORT_FILENAME}"},
    )


@router.get("/charts", response_model=ChartSeriesResponse)
async def get_chart_series(
    from_date: date | None = Query(default=None, alias="from"),
    to_date: date | None = Query(default=None, alias="to"),
    student_id: int | None = Query(default=None, alias="studentId"),
    identity: Identity = Depends(get_current_identity),
) -> ChartSeriesResponse:
    if from_date is not None and to_date is not None and from_date > to_date:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_DATE_RANGE"})

    async with SessionLocal() as session:
        series = await LeaderboardService.build_chart_series(
            session,
            from_date=from_date,
            to_date=to_date,
            student_id=student_id,
        )
    return ChartSeriesResponse(
        dates=list(series.dates),
        beginner=list(series.beginner),
        intermediate=list(series.intermediate),
        advanced=list(series.advanced),
        totals=LevelTotalsResponse(
            beginner=series.totals.beginner,
            intermediate=series.totals.intermediate,
            advanced=series.totals.advanced,
        ),
    )
