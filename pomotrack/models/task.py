import uuid
from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pomotrack.models.base import Base

DEFAULT_PROJECT = "No Project"


class Task(Base):
    __tablename__ = "tasks"

    user_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500))
    project: Mapped[str] = mapped_column(String(200), nullable=False, default=DEFAULT_PROJECT)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    estimated_pomodoros: Mapped[int] = mapped_column(Integer, nullable=False, default=1)  # 1-10
    completed_pomodoros: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    priority: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")  # low, medium, high
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship(back_populates="tasks")  # noqa: F821

    __table_args__ = (
        Index("ix_tasks_user_completed_created", "user_id", "completed", "created_at"),
        CheckConstraint("estimated_pomodoros BETWEEN 1 AND 10", name="estimated_pomodoros_range"),
        CheckConstraint("completed_pomodoros >= 0", name="completed_pomodoros_non_negative"),
    )
