from app.game.scoring.levels import QuizLevel

# Reward by the attempt on which the answer became correct; the last entry
# applies to every later attempt.
REWARD_TABLE: dict[QuizLevel, tuple[int, ...]] = {
    QuizLevel.BEGINNER: (10, 5, 3, 0),
    QuizLevel.INTERMEDIATE: (20, 15, 10, 5),
    QuizLevel.ADVANCED: (30, 25, 20, 10),
}

EMPTY_QUIZ_MESSAGE = "No quiz created for today"
BLOCKED_MESSAGE = "Quiz already completed today"
