from __future__ import annotations

from datetime import date
from decimal import Decimal
from io import BytesIO

from openpyxl import load_workbook

from app.game.leaderboard.report import render_report_xlsx
from app.game.leaderboard.types import LeaderboardReport, ReportDateRow, ReportStudentAverage


def _load_sheet(payload: bytes):
    workbook = load_workbook(BytesIO(payload))
    return workbook.active


def test_render_report_xlsx_layout() -> None:
    report = LeaderboardReport(
        date_rows=(
            ReportDateRow(
                name="Ada",
                email="ada@example.com",
                quiz_date=date(2026, 3, 1),
                beginner=10,
                intermediate=20,
                advanced=0,
            ),
            ReportDateRow(
                name="Ada",
                email="ada@example.com",
                quiz_date=date(2026, 3, 2),
                beginner=5,
                intermediate=0,
                advanced=30,
            ),
        ),
        averages=(
            ReportStudentAverage(
                name="Ada",
                email="ada@example.com",
                avg_beginner=Decimal("7.50"),
                avg_intermediate=Decimal("20.00"),
                avg_advanced=Decimal("30.00"),
                overall_avg=Decimal("19.17"),
            ),
        ),
    )

    sheet = _load_sheet(render_report_xlsx(report))

    assert sheet.title == "Leaderboard"
    assert [cell.value for cell in sheet[1]] == [
        "Name",
        "Email",
        "Date",
        "Beginner",
        "Intermediate",
        "Advanced",
        "Total",
    ]
    assert [cell.value for cell in sheet[2]] == ["Ada", "ada@example.com", "2026-03-01", 10, 20, 0, 30]
    assert [cell.value for cell in sheet[3]] == ["Ada", "ada@example.com", "2026-03-02", 5, 0, 30, 35]
    assert all(cell.value is None for cell in sheet[4])
    assert sheet["A5"].value == "STUDENT AVERAGE SUMMARY"
    assert sheet["A6"].value == "Name"
    assert [sheet.cell(row=6, column=col).value for col in range(4, 8)] == [
        "Avg Beginner",
        "Avg Intermediate",
        "Avg Advanced",
        "Overall Avg",
    ]
    assert sheet["A7"].value == "Ada"
    assert [sheet.cell(row=7, column=col).value for col in range(4, 8)] == [7.5, 20.0, 30.0, 19.17]
    assert sheet["D7"].number_format == "0.00"


def test_render_report_xlsx_without_rows_still_has_summary_block() -> None:
    sheet = _load_sheet(render_report_xlsx(LeaderboardReport(date_rows=(), averages=())))

    assert sheet["A1"].value == "Name"
    assert sheet["A3"].value == "STUDENT AVERAGE SUMMARY"
    assert sheet["A4"].value == "Name"
    assert sheet.max_row == 4
