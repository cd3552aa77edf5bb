import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Report payloads are emitted with camelCase keys."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class ActivitySummary(CamelModel):
    hours_focused: float
    days_accessed: int
    day_streak: int


class TimerTypeStats(CamelModel):
    count: int
    total_duration: int  # planned minutes
    total_actual_duration: float  # elapsed minutes


class DailyStat(CamelModel):
    date: date
    focus_hours: float
    sessions: int


class TaskStats(CamelModel):
    total_tasks: int = 0
    completed_tasks: int = 0
    total_pomodoros: int = 0
    completed_pomodoros: int = 0


class ProjectStats(TaskStats):
    project: str


class ReportResponse(CamelModel):
    period: str  # day, week, month, year
    start_date: datetime
    activity_summary: ActivitySummary
    timer_stats: dict[str, TimerTypeStats]
    daily_stats: list[DailyStat]
    task_stats: TaskStats
    project_stats: list[ProjectStats]


class TaskOverviewResponse(CamelModel):
    overall: TaskStats
    projects: list[ProjectStats]


class SessionTask(CamelModel):
    id: uuid.UUID
    title: str
    project: str


class SessionDetail(CamelModel):
    id: uuid.UUID
    type: str
    start_time: datetime
    end_time: datetime | None
    duration: int
    completed: bool
    task: SessionTask | None = None


class SessionDetailResponse(CamelModel):
    sessions: list[SessionDetail]
    total_pages: int
    current_page: int
    total: int


class RankingEntry(CamelModel):
    username: str | None
    total_focus_time: float  # minutes


class RankingResponse(CamelModel):
    period: str  # week, month
    ranking: list[RankingEntry] = Field(default_factory=list)
