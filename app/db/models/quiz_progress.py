from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import (
    BigInteger,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class StudentQuizProgress(Base):
    __tablename__ = "student_quiz_progress"
    __table_args__ = (
        UniqueConstraint(
            "student_id",
            "quiz_date",
            "level",
            name="uq_student_quiz_progress_student_date_level",
        ),
        CheckConstraint("total_reward >= 0", name="ck_student_quiz_progress_total_reward_non_negative"),
        CheckConstraint(
            "level IN ('beginner','intermediate','advanced')",
            name="ck_student_quiz_progress_level",
        ),
        Index("idx_student_quiz_progress_date_level", "quiz_date", "level"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    student_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
    )
    quiz_date: Mapped[date] = mapped_column(Date, nullable=False)
    level: Mapped[str] = mapped_column(String(16), nullable=False)
    total_reward: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )


class ProgressAnswer(Base):
    __tablename__ = "student_quiz_progress_answers"
    __table_args__ = (
        UniqueConstraint(
            "progress_id",
            "question_id",
            name="uq_student_quiz_progress_answers_progress_question",
        ),
        CheckConstraint("attempt_count >= 0", name="ck_progress_answers_attempt_count_non_negative"),
        CheckConstraint("earned_reward >= 0", name="ck_progress_answers_earned_reward_non_negative"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    progress_id: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("student_quiz_progress.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    attempt_count: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    earned_reward: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
