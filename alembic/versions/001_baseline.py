"""Baseline schema: users, magic links, money tracking, coach, feedback.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _id() -> sa.Column:
    return sa.Column("id", sa.String(36), primary_key=True)


def _user_fk(index: bool = False) -> sa.Column:
    return sa.Column(
        "user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=index
    )


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    """Create all tables."""
    # --- users ---
    op.create_table(
        "users",
        _id(),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("name", sa.String(100), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("income_sources", sa.JSON(), nullable=False, server_default=sa.text("'[]'")),
        sa.Column("monthly_income", sa.Float(), nullable=True),
        sa.Column("financial_goal", sa.String(32), nullable=True),
        sa.Column("employment_status", sa.String(32), nullable=True),
        sa.Column("has_emergency_fund", sa.String(16), nullable=True),
        sa.Column("debt_situation", sa.String(32), nullable=True),
        sa.Column("language_pref", sa.String(16), nullable=False, server_default="ENGLISH"),
        sa.Column("quiz_result", sa.String(16), nullable=True),
        sa.Column("quiz_challenge", sa.Text(), nullable=True),
        sa.Column("onboarded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("xp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("streak_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("longest_streak", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_check_in", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.execute("ALTER TABLE users ADD CONSTRAINT ck_users_xp CHECK (xp >= 0)")
    op.execute("ALTER TABLE users ADD CONSTRAINT ck_users_level CHECK (level BETWEEN 1 AND 4)")
    op.execute("ALTER TABLE users ADD CONSTRAINT ck_users_longest_streak CHECK (longest_streak >= streak_count)")

    # --- magic_links ---
    op.create_table(
        "magic_links",
        _id(),
        sa.Column("token_hash", sa.String(64), nullable=False, unique=True),
        _user_fk(),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index("ix_magic_links_expires_at", "magic_links", ["expires_at"])

    # --- money tracking ---
    op.create_table(
        "income_entries",
        _id(),
        _user_fk(index=True),
        sa.Column("source", sa.String(64), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.String(500), nullable=True),
        _created_at(),
    )
    op.create_table(
        "expenses",
        _id(),
        _user_fk(index=True),
        sa.Column("category", sa.String(16), nullable=False),
        sa.Column("subcategory", sa.String(100), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.String(500), nullable=True),
        _created_at(),
    )
    op.execute(
        "ALTER TABLE expenses ADD CONSTRAINT ck_expenses_category CHECK (category IN ('NEEDS', 'WANTS', 'SAVINGS'))"
    )
    op.create_table(
        "monthly_budgets",
        _id(),
        _user_fk(),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("income", sa.Float(), nullable=False),
        sa.Column("needs", sa.Float(), nullable=False),
        sa.Column("wants", sa.Float(), nullable=False),
        sa.Column("savings", sa.Float(), nullable=False),
        _created_at(),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "month", "year", name="uq_monthly_budget_user_month"),
    )
    op.create_table(
        "budget_snapshots",
        _id(),
        _user_fk(index=True),
        sa.Column("income", sa.Float(), nullable=False),
        sa.Column("needs", sa.Float(), nullable=False),
        sa.Column("wants", sa.Float(), nullable=False),
        sa.Column("savings", sa.Float(), nullable=False),
        _created_at(),
    )

    # --- coach ---
    op.create_table(
        "daily_advice",
        _id(),
        _user_fk(),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        _created_at(),
        sa.UniqueConstraint("user_id", "date", name="uq_daily_advice_user_date"),
    )
    op.create_table(
        "chat_messages",
        _id(),
        _user_fk(index=True),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        _created_at(),
    )

    # --- feedback ---
    op.create_table(
        "feedback",
        _id(),
        _user_fk(),
        sa.Column("rating", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(500), nullable=True),
        sa.Column("context", sa.String(50), nullable=True),
        sa.Column("page", sa.String(100), nullable=True),
        _created_at(),
    )
    op.execute("ALTER TABLE feedback ADD CONSTRAINT ck_feedback_rating CHECK (rating BETWEEN -1 AND 1)")


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "feedback",
        "chat_messages",
        "daily_advice",
        "budget_snapshots",
        "monthly_budgets",
        "expenses",
        "income_entries",
        "magic_links",
        "users",
    ):
        op.drop_table(table)
