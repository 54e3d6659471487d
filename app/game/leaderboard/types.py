from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class StudentTotalRow:
    student_id: int
    name: str | None
    email: str
    total: int


@dataclass(frozen=True, slots=True)
class LevelTotalRow:
    level: str
    total: int


@dataclass(frozen=True, slots=True)
class StudentDateLevelRow:
    student_id: int
    name: str | None
    email: str
    quiz_date: date
    level: str
    total: int


@dataclass(frozen=True, slots=True)
class DateLevelRow:
    quiz_date: date
    level: str
    total: int


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    rank: int
    student_id: int
    name: str
    email: str
    score: int


@dataclass(frozen=True, slots=True)
class LeaderboardPage:
    top3: tuple[LeaderboardEntry, ...]
    total_count: int
    page: int
    per_page: int
    page_list: tuple[LeaderboardEntry, ...]


@dataclass(frozen=True, slots=True)
class LevelTotals:
    beginner: int = 0
    intermediate: int = 0
    advanced: int = 0

    @property
    def overall(self) -> int:
        return self.beginner + self.intermediate + self.advanced


@dataclass(frozen=True, slots=True)
class StudentSummary:
    student_id: int
    name: str
    email: str
    levels: LevelTotals
    rank: int | None

    @property
    def overall(self) -> int:
        return self.levels.overall


@dataclass(frozen=True, slots=True)
class ReportDateRow:
    name: str
    email: str
    quiz_date: date
    beginner: int
    intermediate: int
    advanced: int

    @property
    def total(self) -> int:
        return self.beginner + self.intermediate + self.advanced


@dataclass(frozen=True, slots=True)
class ReportStudentAverage:
    name: str
    email: str
    avg_beginner: Decimal
    avg_intermediate: Decimal
    avg_advanced: Decimal
    overall_avg: Decimal


@dataclass(frozen=True, slots=True)
class LeaderboardReport:
    date_rows: tuple[ReportDateRow, ...]
    averages: tuple[ReportStudentAverage, ...]


@dataclass(frozen=True, slots=True)
class ChartSeries:
    dates: tuple[date, ...]
    beginner: tuple[int, ...]
    intermediate: tuple[int, ...]
    advanced: tuple[int, ...]
    totals: LevelTotals
