"""diamond_quiz_core_schema

Revision ID: 5c1d2e3f4a6b
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "5c1d2e3f4a6b"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "students",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False),
        sa.Column("dob", sa.String(32), nullable=False),
        sa.Column("gender", sa.String(16), nullable=False),
        sa.Column("class_name", sa.String(64), nullable=False),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("email", name="uq_students_email"),
    )
    op.create_index("idx_students_class_name", "students", ["class_name"])
    op.create_index("idx_students_created_at", "students", ["created_at"])

    op.create_table(
        "admins",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(32), nullable=False, server_default=sa.text("''")),
        sa.Column("dob", sa.String(32), nullable=False, server_default=sa.text("''")),
        sa.Column("gender", sa.String(16), nullable=False, server_default=sa.text("''")),
        sa.Column("password_hash", sa.String(128), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default=sa.text("'admin'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("role IN ('admin','superadmin')", name="ck_admins_role"),
        sa.UniqueConstraint("email", name="uq_admins_email"),
    )

    op.create_table(
        "quiz_questions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("quiz_date", sa.Date(), nullable=False),
        sa.Column("level", sa.String(16), nullable=False),
        sa.Column("question", sa.Text(), nullable=False),
        sa.Column("options", postgresql.ARRAY(sa.Text()), nullable=False),
        sa.Column("correct_option_index", sa.SmallInteger(), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "correct_option_index >= 0 AND correct_option_index < cardinality(options)",
            name="ck_quiz_questions_correct_option_range",
        ),
        sa.CheckConstraint("cardinality(options) = 4", name="ck_quiz_questions_four_options"),
        sa.CheckConstraint(
            "level IN ('beginner','intermediate','advanced')",
            name="ck_quiz_questions_level",
        ),
    )
    op.create_index("idx_quiz_questions_date_level", "quiz_questions", ["quiz_date", "level"])

    op.create_table(
        "student_quiz_progress",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("student_id", sa.BigInteger(), nullable=False),
        sa.Column("quiz_date", sa.Date(), nullable=False),
        sa.Column("level", sa.String(16), nullable=False),
        sa.Column("total_reward", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "total_reward >= 0",
            name="ck_student_quiz_progress_total_reward_non_negative",
        ),
        sa.CheckConstraint(
            "level IN ('beginner','intermediate','advanced')",
            name="ck_student_quiz_progress_level",
        ),
        sa.ForeignKeyConstraint(["student_id"], ["students.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "student_id",
            "quiz_date",
            "level",
            name="uq_student_quiz_progress_student_date_level",
        ),
    )
    op.create_index(
        "idx_student_quiz_progress_date_level",
        "student_quiz_progress",
        ["quiz_date", "level"],
    )

    op.create_table(
        "student_quiz_progress_answers",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("progress_id", sa.BigInteger(), nullable=False),
        sa.Column("question_id", sa.BigInteger(), nullable=False),
        sa.Column("attempt_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("earned_reward", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_correct", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "attempt_count >= 0",
            name="ck_progress_answers_attempt_count_non_negative",
        ),
        sa.CheckConstraint(
            "earned_reward >= 0",
            name="ck_progress_answers_earned_reward_non_negative",
        ),
        sa.ForeignKeyConstraint(["progress_id"], ["student_quiz_progress.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "progress_id",
            "question_id",
            name="uq_student_quiz_progress_answers_progress_question",
        ),
    )

    op.create_table(
        "quotes",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("author", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("idx_quotes_created_at", "quotes", ["created_at"])


def downgrade() -> None:
    op.drop_index("idx_quotes_created_at", table_name="quotes")
    op.drop_table("quotes")
    op.drop_table("student_quiz_progress_answers")
    op.drop_index("idx_student_quiz_progress_date_level", table_name="student_quiz_progress")
    op.drop_table("student_quiz_progress")
    op.drop_index("idx_quiz_questions_date_level", table_name="quiz_questions")
    op.drop_table("quiz_questions")
    op.drop_table("admins")
    op.drop_index("idx_students_created_at", table_name="students")
    op.drop_index("idx_students_class_name", table_name="students")
    op.drop_table("students")
