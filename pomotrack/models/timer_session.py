import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql.expression import FunctionElement

from pomotrack.models.base import Base

POMODORO = "pomodoro"
SHORT_BREAK = "short-break"
LONG_BREAK = "long-break"
SESSION_TYPES = (POMODORO, SHORT_BREAK, LONG_BREAK)


def as_utc(value: datetime) -> datetime:
    """Timestamps are stored as UTC; SQLite hands them back naive."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_minutes(start_time: datetime, end_time: datetime) -> float:
    return (as_utc(end_time) - as_utc(start_time)).total_seconds() / 60


class elapsed_seconds(FunctionElement):
    """SQL seconds from ``start`` to ``end``: ``elapsed_seconds(start, end)``."""

    type = Float()
    inherit_cache = True
    name = "elapsed_seconds"


@compiles(elapsed_seconds, "postgresql")
def _elapsed_seconds_postgresql(element, compiler, **kw):
    start, end = (compiler.process(arg, **kw) for arg in element.clauses)
    return f"EXTRACT(EPOCH FROM ({end} - {start}))"


@compiles(elapsed_seconds, "sqlite")
def _elapsed_seconds_sqlite(element, compiler, **kw):
    start, end = (compiler.process(arg, **kw) for arg in element.clauses)
    return f"((julianday({end}) - julianday({start})) * 86400.0)"


class TimerSession(Base):
    __tablename__ = "timer_sessions"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    task_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("tasks.id", ondelete="SET NULL"), index=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)  # pomodoro, short-break, long-break
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # planned minutes
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="timer_sessions")  # noqa: F821
    task: Mapped["Task | None"] = relationship()  # noqa: F821

    __table_args__ = (
        Index("ix_timer_sessions_user_completed_start", "user_id", "completed", "start_time"),
        CheckConstraint("type IN ('pomodoro', 'short-break', 'long-break')", name="type"),
        CheckConstraint(
            "NOT completed OR (end_time IS NOT NULL AND end_time >= start_time)",
            name="completed_bounds",
        ),
    )

    @property
    def counts_toward_reports(self) -> bool:
        """Only finished runs with both bounds recorded are aggregated."""
        return bool(self.completed) and self.end_time is not None

    @property
    def elapsed_minutes(self) -> float | None:
        if self.end_time is None:
            return None
        return elapsed_minutes(self.start_time, self.end_time)
