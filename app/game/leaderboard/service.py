from __future__ import annotations

from datetime import date

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.db.repo.students_repo import StudentsRepo
from app.game.leaderboard.aggregation import (
    build_chart_series,
    build_report_data,
    bucket_level_totals,
    display_name,
    find_rank,
    normalize_paging,
    paginate,
    rank_students,
)
from app.game.leaderboard.constants import DEFAULT_PER_PAGE
from app.game.leaderboard.errors import StudentNotFoundError
from app.game.leaderboard.report import render_report_xlsx
from app.game.leaderboard.types import ChartSeries, LeaderboardPage, StudentSummary

logger = structlog.get_logger(__name__)


class LeaderboardService:
    @staticmethod
    async def rank_students(
        session: AsyncSession,
        *,
        page: int | None = None,
        per_page: int | None = None,
        default_per_page: int = DEFAULT_PER_PAGE,
    ) -> LeaderboardPage:
        resolved_page, resolved_per_page = normalize_paging(
            page,
            per_page,
            default_per_page=default_per_page,
        )
        rows = await LeaderboardRepo.aggregate_by_student(session)
        return paginate(rank_students(rows), page=resolved_page, per_page=resolved_per_page)

    @staticmethod
    async def summarize_student(session: AsyncSession, *, student_id: int) -> StudentSummary:
        student = await StudentsRepo.get_by_id(session, student_id)
        if student is None:
            raise StudentNotFoundError(f"student {student_id} not found")

        level_rows = await LeaderboardRepo.aggregate_by_student_and_level(session, student_id=student_id)
        ranking = rank_students(await LeaderboardRepo.aggregate_by_student(session))
        return StudentSummary(
            student_id=student.id,
            name=display_name(student.name, student.email),
            email=student.email,
            levels=bucket_level_totals(level_rows),
            rank=find_rank(ranking, student.id),
        )

    @staticmethod
    async def build_report(session: AsyncSession) -> bytes:
        rows = await LeaderboardRepo.aggregate_by_student_date_level(session)
        report = build_report_data(rows)
        payload = render_report_xlsx(report)
        logger.info(
            "leaderboard_report_built",
            date_rows=len(report.date_rows),
            students=len(report.averages),
            size_bytes=len(payload),
        )
        return payload

    @staticmethod
    async def build_chart_series(
        session: AsyncSession,
        *,
        from_date: date | None = None,
        to_date: date | None = None,
        student_id: int | None = None,
    ) -> ChartSeries:
        rows = await LeaderboardRepo.aggregate_by_date_level(
            session,
            from_date=from_date,
            to_date=to_date,
            student_id=student_id,
        )
        return build_chart_series(rows)
