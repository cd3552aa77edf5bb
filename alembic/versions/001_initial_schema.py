"""Initial schema - users, tasks, timer sessions

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("settings_json", postgresql.JSONB(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # Tasks
    op.create_table(
        "tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("project", sa.String(200), nullable=False, server_default="No Project"),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("estimated_pomodoros", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("completed_pomodoros", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("priority", sa.String(10), nullable=False, server_default="medium"),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_tasks"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_tasks_user_id_users", ondelete="CASCADE"),
        sa.CheckConstraint("estimated_pomodoros BETWEEN 1 AND 10", name="ck_tasks_estimated_pomodoros_range"),
        sa.CheckConstraint("completed_pomodoros >= 0", name="ck_tasks_completed_pomodoros_non_negative"),
    )
    op.create_index("ix_tasks_user_id", "tasks", ["user_id"])
    op.create_index("ix_tasks_user_completed_created", "tasks", ["user_id", "completed", "created_at"])

    # Timer sessions
    op.create_table(
        "timer_sessions",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("task_id", sa.Uuid(), nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_timer_sessions"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_timer_sessions_user_id_users", ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["task_id"], ["tasks.id"], name="fk_timer_sessions_task_id_tasks", ondelete="SET NULL"),
        sa.CheckConstraint(
            "type IN ('pomodoro', 'short-break', 'long-break')", name="ck_timer_sessions_type"
        ),
        sa.CheckConstraint(
            "NOT completed OR (end_time IS NOT NULL AND end_time >= start_time)",
            name="ck_timer_sessions_completed_bounds",
        ),
    )
    op.create_index("ix_timer_sessions_user_id", "timer_sessions", ["user_id"])
    op.create_index("ix_timer_sessions_task_id", "timer_sessions", ["task_id"])
    op.create_index(
        "ix_timer_sessions_user_completed_start",
        "timer_sessions",
        ["user_id", "completed", "start_time"],
    )


def downgrade() -> None:
    op.drop_table("timer_sessions")
    op.drop_table("tasks")
    op.drop_table("users")
