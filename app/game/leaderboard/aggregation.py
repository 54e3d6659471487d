from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from app.game.leaderboard.constants import CHART_LEVEL_CAPS, TOP_ENTRIES
from app.game.leaderboard.types import (
    ChartSeries,
    DateLevelRow,
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardReport,
    LevelTotalRow,
    LevelTotals,
    ReportDateRow,
    ReportStudentAverage,
    StudentDateLevelRow,
    StudentTotalRow,
)
from app.game.scoring.levels import QuizLevel, match_level

TWO_PLACES = Decimal("0.01")


def display_name(name: str | None, email: str) -> str:
    cleaned = (name or "").strip()
    return cleaned or email


def rank_students(rows: Iterable[StudentTotalRow]) -> list[LeaderboardEntry]:
    """Orders by total descending; equal totals keep ascending student id order."""
    ordered = sorted(rows, key=lambda row: (-int(row.total or 0), row.student_id))
    return [
        LeaderboardEntry(
            rank=index,
            student_id=row.student_id,
            name=display_name(row.name, row.email),
            email=row.email,
            score=int(row.total or 0),
        )
        for index, row in enumerate(ordered, start=1)
    ]


def normalize_paging(page: int | None, per_page: int | None, *, default_per_page: int) -> tuple[int, int]:
    resolved_page = 1 if page is None else int(page)
    resolved_per_page = default_per_page if per_page is None else int(per_page)
    return max(1, resolved_page), max(1, resolved_per_page)


def paginate(entries: Sequence[LeaderboardEntry], *, page: int, per_page: int) -> LeaderboardPage:
    start = (page - 1) * per_page
    return LeaderboardPage(
        top3=tuple(entries[:TOP_ENTRIES]),
        total_count=len(entries),
        page=page,
        per_page=per_page,
        page_list=tuple(entries[start : start + per_page]),
    )


def find_rank(entries: Iterable[LeaderboardEntry], student_id: int) -> int | None:
    for entry in entries:
        if entry.student_id == student_id:
            return entry.rank
    return None


def bucket_level_totals(rows: Iterable[LevelTotalRow]) -> LevelTotals:
    sums = {level: 0 for level in QuizLevel}
    for row in rows:
        level = match_level(row.level)
        if level is not None:
            sums[level] += int(row.total or 0)
    return LevelTotals(
        beginner=sums[QuizLevel.BEGINNER],
        intermediate=sums[QuizLevel.INTERMEDIATE],
        advanced=sums[QuizLevel.ADVANCED],
    )


@dataclass(slots=True)
class _StudentReportState:
    name: str
    email: str
    by_date: dict[date, dict[QuizLevel, int]] = field(default_factory=dict)
    level_totals: dict[QuizLevel, int] = field(default_factory=lambda: {level: 0 for level in QuizLevel})
    level_days: dict[QuizLevel, int] = field(default_factory=lambda: {level: 0 for level in QuizLevel})


def _average(total: int, days: int) -> Decimal:
    return Decimal(total) / Decimal(days or 1)


def build_report_data(rows: Iterable[StudentDateLevelRow]) -> LeaderboardReport:
    students: dict[int, _StudentReportState] = {}
    for row in rows:
        level = match_level(row.level)
        state = students.get(row.student_id)
        if state is None:
            state = _StudentReportState(name=display_name(row.name, row.email), email=row.email)
            students[row.student_id] = state
        day = state.by_date.setdefault(row.quiz_date, {lvl: 0 for lvl in QuizLevel})
        if level is None:
            continue
        score = int(row.total or 0)
        day[level] += score
        state.level_totals[level] += score
        state.level_days[level] += 1

    date_rows: list[ReportDateRow] = []
    averages: list[ReportStudentAverage] = []
    for state in students.values():
        for quiz_date, day in state.by_date.items():
            date_rows.append(
                ReportDateRow(
                    name=state.name,
                    email=state.email,
                    quiz_date=quiz_date,
                    beginner=day[QuizLevel.BEGINNER],
                    intermediate=day[QuizLevel.INTERMEDIATE],
                    advanced=day[QuizLevel.ADVANCED],
                )
            )

        per_level = {
            level: _average(state.level_totals[level], state.level_days[level]) for level in QuizLevel
        }
        overall = sum(per_level.values(), Decimal(0)) / Decimal(len(per_level))
        averages.append(
            ReportStudentAverage(
                name=state.name,
                email=state.email,
                avg_beginner=per_level[QuizLevel.BEGINNER].quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
                avg_intermediate=per_level[QuizLevel.INTERMEDIATE].quantize(
                    TWO_PLACES, rounding=ROUND_HALF_UP
                ),
                avg_advanced=per_level[QuizLevel.ADVANCED].quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
                overall_avg=overall.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
            )
        )

    return LeaderboardReport(date_rows=tuple(date_rows), averages=tuple(averages))


def normalize_to_cap(score: int, cap: int) -> int:
    if not cap:
        return 0
    percent = Decimal(score) / Decimal(cap) * 100
    return int(percent.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def build_chart_series(rows: Iterable[DateLevelRow]) -> ChartSeries:
    by_date: dict[date, dict[QuizLevel, int]] = {}
    totals = {level: 0 for level in QuizLevel}
    for row in rows:
        level = match_level(row.level)
        day = by_date.setdefault(row.quiz_date, {lvl: 0 for lvl in QuizLevel})
        if level is None:
            continue
        score = int(row.total or 0)
        day[level] += score
        totals[level] += score

    dates = tuple(sorted(by_date))

    def _series(level: QuizLevel) -> tuple[int, ...]:
        cap = CHART_LEVEL_CAPS[level]
        return tuple(normalize_to_cap(by_date[day][level], cap) for day in dates)

    return ChartSeries(
        dates=dates,
        beginner=_series(QuizLevel.BEGINNER),
        intermediate=_series(QuizLevel.INTERMEDIATE),
        advanced=_series(QuizLevel.ADVANCED),
        totals=LevelTotals(
            beginner=totals[QuizLevel.BEGINNER],
            intermediate=totals[QuizLevel.INTERMEDIATE],
            advanced=totals[QuizLevel.ADVANCED],
        ),
    )
