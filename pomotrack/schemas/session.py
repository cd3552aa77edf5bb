import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, model_validator

from pomotrack.models.timer_session import as_utc

SessionType = Literal["pomodoro", "short-break", "long-break"]


class TimerSessionCreate(BaseModel):
    type: SessionType
    start_time: datetime
    end_time: datetime | None = None
    duration: int = Field(ge=1, le=240)  # planned minutes
    completed: bool = False
    task_id: uuid.UUID | None = None

    @model_validator(mode="after")
    def check_bounds(self) -> "TimerSessionCreate":
        if self.completed and self.end_time is None:
            raise ValueError("Completed sessions need an end_time")
        if self.end_time is not None and as_utc(self.end_time) < as_utc(self.start_time):
            raise ValueError("end_time must not precede start_time")
        return self


class TimerSessionComplete(BaseModel):
    end_time: datetime | None = None


class TimerSessionResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    task_id: uuid.UUID | None
    type: str
    start_time: datetime
    end_time: datetime | None
    duration: int
    completed: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
