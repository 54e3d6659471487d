from app.db.models.admins import Admin
from app.db.models.base import Base
from app.db.models.quiz_progress import ProgressAnswer, StudentQuizProgress
from app.db.models.quiz_questions import QuizQuestion
from app.db.models.quotes import Quote
from app.db.models.students import Student

__all__ = [
    "Admin",
    "Base",
    "ProgressAnswer",
    "QuizQuestion",
    "Quote",
    "Student",
    "StudentQuizProgress",
]
