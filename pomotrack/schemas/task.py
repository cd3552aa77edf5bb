import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from pomotrack.models.task import DEFAULT_PROJECT

Priority = Literal["low", "medium", "high"]


class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    project: str = Field(default=DEFAULT_PROJECT, max_length=200)
    estimated_pomodoros: int = Field(default=1, ge=1, le=10)
    priority: Priority = "medium"
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Task title is required")
        return value

    @field_validator("project")
    @classmethod
    def default_project(cls, value: str) -> str:
        return value.strip() or DEFAULT_PROJECT


class TaskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=500)
    project: str | None = Field(default=None, max_length=200)
    estimated_pomodoros: int | None = Field(default=None, ge=1, le=10)
    priority: Priority | None = None
    due_date: datetime | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Task title cannot be empty")
        return value

    @field_validator("project")
    @classmethod
    def default_project(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or DEFAULT_PROJECT


class TaskPomodorosUpdate(BaseModel):
    completed_pomodoros: int = Field(ge=0)


class TaskResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    title: str
    description: str | None
    project: str
    completed: bool
    completed_at: datetime | None
    estimated_pomodoros: int
    completed_pomodoros: int
    priority: str
    due_date: datetime | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
