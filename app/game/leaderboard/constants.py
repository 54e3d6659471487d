from app.game.scoring.levels import QuizLevel

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 10
TOP_ENTRIES = 3

# Highest daily diamond sum a chart point is scaled against, per level.
CHART_LEVEL_CAPS: dict[QuizLevel, int] = {
    QuizLevel.BEGINNER: 50,
    QuizLevel.INTERMEDIATE: 100,
    QuizLevel.ADVANCED: 150,
}

REPORT_SHEET_TITLE = "Leaderboard"
REPORT_FILENAME = "leaderboard.xlsx"
REPORT_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
REPORT_COLUMNS: tuple[tuple[str, int], ...] = (
    ("Name", 25),
    ("Email", 30),
    ("Date", 15),
    ("Beginner", 15),
    ("Intermediate", 15),
    ("Advanced", 15),
    ("Total", 15),
)
REPORT_SUMMARY_TITLE = "STUDENT AVERAGE SUMMARY"
REPORT_SUMMARY_HEADERS = ("Avg Beginner", "Avg Intermediate", "Avg Advanced", "Overall Avg")
