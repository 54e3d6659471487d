from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.game.scoring.types import AnswerOutcome, AnswerSnapshot, ProgressSnapshot, StudentQuizView


class AnswerSubmitRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: int = Field(gt=0, alias="questionId")
    quiz_date: date = Field(alias="date")
    level: str = Field(min_length=1, max_length=32)
    selected_option: int = Field(ge=0, le=3, alias="selectedOption")


class QuestionResponse(BaseModel):
    id: int
    question: str
    options: list[str]
    image_url: str | None = None


class AnswerResponse(BaseModel):
    question_id: int
    attempt_count: int = Field(ge=0)
    earned_reward: int = Field(ge=0)
    is_correct: bool


class ProgressResponse(BaseModel):
    total_reward: int = Field(ge=0)
    completed: bool
    answers: list[AnswerResponse]


class StudentProgressResponse(ProgressResponse):
    quiz_date: date
    level: str


class StudentQuizResponse(BaseModel):
    questions: list[QuestionResponse]
    progress: StudentProgressResponse
    message: str | None = None


class AnswerSubmitResponse(BaseModel):
    success: bool
    blocked: bool
    total_reward: int = Field(ge=0)
    completed: bool
    progress: ProgressResponse
    message: str | None = None


class TotalRewardResponse(BaseModel):
    total: int = Field(ge=0)


def _answers_response(answers: tuple[AnswerSnapshot, ...]) -> list[AnswerResponse]:
    return [
        AnswerResponse(
            question_id=answer.question_id,
            attempt_count=answer.attempt_count,
            earned_reward=answer.earned_reward,
            is_correct=answer.is_correct,
        )
        for answer in answers
    ]


def progress_response(progress: ProgressSnapshot) -> StudentProgressResponse:
    return StudentProgressResponse(
        quiz_date=progress.quiz_date,
        level=progress.level,
        total_reward=progress.total_reward,
        completed=progress.completed,
        answers=_answers_response(progress.answers),
    )


def quiz_view_response(view: StudentQuizView) -> StudentQuizResponse:
    return StudentQuizResponse(
        questions=[
            QuestionResponse(
                id=question.question_id,
                question=question.question,
                options=list(question.options),
                image_url=question.image_url,
            )
            for question in view.questions
        ],
        progress=progress_response(view.progress),
        message=view.message,
    )


def answer_outcome_response(outcome: AnswerOutcome) -> AnswerSubmitResponse:
    return AnswerSubmitResponse(
        success=outcome.success,
        blocked=outcome.blocked,
        total_reward=outcome.total_reward,
        completed=outcome.completed,
        progress=ProgressResponse(
            total_reward=outcome.total_reward,
            completed=outcome.completed,
            answers=_answers_response(outcome.answers),
        ),
        message=outcome.message,
    )
