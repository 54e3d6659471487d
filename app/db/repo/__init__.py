from app.db.repo.admins_repo import AdminsRepo
from app.db.repo.leaderboard_repo import LeaderboardRepo
from app.db.repo.quiz_progress_repo import QuizProgressRepo
from app.db.repo.quiz_questions_repo import QuizQuestionsRepo
from app.db.repo.quotes_repo import QuotesRepo
from app.db.repo.students_repo import StudentsRepo

__all__ = [
    "AdminsRepo",
    "LeaderboardRepo",
    "QuizProgressRepo",
    "QuizQuestionsRepo",
    "QuotesRepo",
    "StudentsRepo",
]
