from __future__ import annotations

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from app.game.leaderboard.constants import (
    REPORT_COLUMNS,
    REPORT_SHEET_TITLE,
    REPORT_SUMMARY_HEADERS,
    REPORT_SUMMARY_TITLE,
)
from app.game.leaderboard.types import LeaderboardReport

AVERAGE_NUMBER_FORMAT = "0.00"


def render_report_xlsx(report: LeaderboardReport) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = REPORT_SHEET_TITLE

    sheet.append([header for header, _ in REPORT_COLUMNS])
    for index, (_, width) in enumerate(REPORT_COLUMNS, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = width
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for row in report.date_rows:
        sheet.append(
            [
                row.name,
                row.email,
                row.quiz_date.isoformat(),
                row.beginner,
                row.intermediate,
                row.advanced,
                row.total,
            ]
        )

    # one blank separator row before the summary block
    title_row = sheet.max_row + 2
    sheet.cell(row=title_row, column=1, value=REPORT_SUMMARY_TITLE).font = Font(bold=True)

    header_row = title_row + 1
    sheet.cell(row=header_row, column=1, value="Name").font = Font(bold=True)
    for offset, header in enumerate(REPORT_SUMMARY_HEADERS):
        sheet.cell(row=header_row, column=4 + offset, value=header).font = Font(bold=True)

    for position, average in enumerate(report.averages, start=1):
        row_index = header_row + position
        sheet.cell(row=row_index, column=1, value=average.name)
        values = (
            average.avg_beginner,
            average.avg_intermediate,
            average.avg_advanced,
            average.overall_avg,
        )
        for offset, value in enumerate(values):
            cell = sheet.cell(row=row_index, column=4 + offset, value=float(value))
            cell.number_format = AVERAGE_NUMBER_FORMAT

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
