from __future__ import annotations

from datetime import date
from decimal import Decimal

from app.game.leaderboard.aggregation import (
    build_chart_series,
    build_report_data,
    bucket_level_totals,
    display_name,
    find_rank,
    normalize_paging,
    normalize_to_cap,
    paginate,
    rank_students,
)
from app.game.leaderboard.types import (
    DateLevelRow,
    LevelTotalRow,
    StudentDateLevelRow,
    StudentTotalRow,
)


def _totals(*scores: int) -> list[StudentTotalRow]:
    return [
        StudentTotalRow(student_id=index, name=f"Student {index}", email=f"s{index}@example.com", total=score)
        for index, score in enumerate(scores, start=1)
    ]


def test_rank_students_assigns_positional_ranks() -> None:
    entries = rank_students(_totals(50, 30, 30, 10))

    assert [entry.rank for entry in entries] == [1, 2, 3, 4]
    assert [entry.score for entry in entries] == [50, 30, 30, 10]


def test_rank_students_breaks_ties_by_student_id() -> None:
    rows = [
        StudentTotalRow(student_id=9, name="Nine", email="n@example.com", total=30),
        StudentTotalRow(student_id=4, name="Four", email="f@example.com", total=30),
        StudentTotalRow(student_id=2, name="Two", email="t@example.com", total=80),
    ]

    entries = rank_students(rows)

    assert [entry.student_id for entry in entries] == [2, 4, 9]


def test_display_name_falls_back_to_email() -> None:
    assert display_name(None, "a@example.com") == "a@example.com"
    assert display_name("  ", "a@example.com") == "a@example.com"
    assert display_name("Ada", "a@example.com") == "Ada"


def test_paginate_keeps_top_three_and_slices_page() -> None:
    entries = rank_students(_totals(90, 80, 70, 60, 50, 40, 30))

    page = paginate(entries, page=2, per_page=3)

    assert [entry.score for entry in page.top3] == [90, 80, 70]
    assert [entry.score for entry in page.page_list] == [60, 50, 40]
    assert page.total_count == 7
    assert page.page == 2
    assert page.per_page == 3


def test_paginate_beyond_last_page_is_empty() -> None:
    entries = rank_students(_totals(10, 5))

    page = paginate(entries, page=4, per_page=10)

    assert page.page_list == ()
    assert len(page.top3) == 2


def test_normalize_paging_floors_to_one_and_applies_default() -> None:
    assert normalize_paging(None, None, default_per_page=10) == (1, 10)
    assert normalize_paging(0, -5, default_per_page=10) == (1, 1)
    assert normalize_paging(3, 25, default_per_page=10) == (3, 25)


def test_normalize_paging_floors_explicit_zero_instead_of_defaulting() -> None:
    assert normalize_paging(1, 0, default_per_page=10) == (1, 1)
    assert normalize_paging(0, 0, default_per_page=10) == (1, 1)


def test_find_rank_returns_none_for_unranked_student() -> None:
    entries = rank_students(_totals(10, 5))

    assert find_rank(entries, 2) == 2
    assert find_rank(entries, 99) is None


def test_bucket_level_totals_merges_legacy_level_text() -> None:
    totals = bucket_level_totals(
        [
            LevelTotalRow(level="beginner", total=15),
            LevelTotalRow(level="Beginner", total=5),
            LevelTotalRow(level="advance", total=30),
            LevelTotalRow(level="unknown", total=99),
        ]
    )

    assert totals.beginner == 20
    assert totals.intermediate == 0
    assert totals.advanced == 30
    assert totals.overall == 50


def test_build_report_data_averages_per_played_day() -> None:
    rows = [
        StudentDateLevelRow(
            student_id=1,
            name="Ada",
            email="ada@example.com",
            quiz_date=date(2026, 3, 1),
            level="beginner",
            total=10,
        ),
        StudentDateLevelRow(
            student_id=1,
            name="Ada",
            email="ada@example.com",
            quiz_date=date(2026, 3, 2),
            level="beginner",
            total=5,
        ),
        StudentDateLevelRow(
            student_id=1,
            name="Ada",
            email="ada@example.com",
            quiz_date=date(2026, 3, 2),
            level="advanced",
            total=25,
        ),
    ]

    report = build_report_data(rows)

    assert [(row.quiz_date, row.beginner, row.advanced, row.total) for row in report.date_rows] == [
        (date(2026, 3, 1), 10, 0, 10),
        (date(2026, 3, 2), 5, 25, 30),
    ]
    (average,) = report.averages
    assert average.avg_beginner == Decimal("7.50")
    assert average.avg_intermediate == Decimal("0.00")
    assert average.avg_advanced == Decimal("25.00")
    assert average.overall_avg == Decimal("10.83")


def test_build_report_data_uses_email_when_name_missing() -> None:
    report = build_report_data(
        [
            StudentDateLevelRow(
                student_id=3,
                name=None,
                email="anon@example.com",
                quiz_date=date(2026, 3, 1),
                level="intermediate",
                total=20,
            )
        ]
    )

    assert report.date_rows[0].name == "anon@example.com"
    assert report.averages[0].name == "anon@example.com"


def test_normalize_to_cap_rounds_half_up() -> None:
    assert normalize_to_cap(25, 50) == 50
    assert normalize_to_cap(1, 200) == 1
    assert normalize_to_cap(1, 300) == 0
    assert normalize_to_cap(150, 150) == 100
    assert normalize_to_cap(10, 0) == 0


def test_build_chart_series_orders_dates_and_scales_levels() -> None:
    series = build_chart_series(
        [
            DateLevelRow(quiz_date=date(2026, 3, 2), level="advanced", total=75),
            DateLevelRow(quiz_date=date(2026, 3, 1), level="beginner", total=25),
            DateLevelRow(quiz_date=date(2026, 3, 1), level="intermediate", total=20),
        ]
    )

    assert series.dates == (date(2026, 3, 1), date(2026, 3, 2))
    assert series.beginner == (50, 0)
    assert series.intermediate == (20, 0)
    assert series.advanced == (0, 50)
    assert series.totals.beginner == 25
    assert series.totals.intermediate == 20
    assert series.totals.advanced == 75


def test_build_chart_series_empty() -> None:
    series = build_chart_series([])

    assert series.dates == ()
    assert series.beginner == ()
    assert series.totals.overall == 0
