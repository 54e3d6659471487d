from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime, Index, SmallInteger, String, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from app.db.models.base import Base


class QuizQuestion(Base):
    __tablename__ = "quiz_questions"
    __table_args__ = (
        CheckConstraint(
            "correct_option_index >= 0 AND correct_option_index < cardinality(options)",
            name="ck_quiz_questions_correct_option_range",
        ),
        CheckConstraint(
            "cardinality(options) = 4",
            name="ck_quiz_questions_four_options",
        ),
        CheckConstraint(
            "level IN ('beginner','intermediate','advanced')",
            name="ck_quiz_questions_level",
        ),
        Index("idx_quiz_questions_date_level", "quiz_date", "level"),
    )

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    quiz_date: Mapped[date] = mapped_column(Date, nullable=False)
    level: Mapped[str] = mapped_column(String(16), nullable=False)
    question: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[str]] = mapped_column(ARRAY(Text), nullable=False)
    correct_option_index: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
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
