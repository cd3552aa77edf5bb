import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.database import get_db
from pomotrack.dependencies import get_current_user
from pomotrack.models.user import User
from pomotrack.schemas.report import TaskOverviewResponse
from pomotrack.schemas.task import (
    TaskCreate,
    TaskPomodorosUpdate,
    TaskResponse,
    TaskUpdate,
)
from pomotrack.services import report_service, task_service

router = APIRouter(prefix="/tasks", tags=["tasks"])


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


@router.get("", response_model=list[TaskResponse])
async def list_tasks(
    completed: bool | None = Query(default=None),
    project: str | None = Query(default=None, max_length=200),
    priority: str | None = Query(default=None, pattern="^(low|medium|high)$"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_service.get_tasks(
        db, user.id, completed=completed, project=project, priority=priority
    )


@router.get("/stats", response_model=TaskOverviewResponse)
async def task_stats(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """All-time task totals, overall and per project."""
    return {
        "overall": await report_service.get_task_stats(db, user.id),
        "projects": await report_service.get_project_stats(db, user.id),
    }


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await task_service.create_task(db, user.id, data.model_dump())


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: uuid.UUID,
    data: TaskUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await task_service.update_task(
        db, user.id, task_id, data.model_dump(exclude_unset=True)
    )
    if task is None:
        raise _not_found()
    return task


@router.patch("/{task_id}/toggle", response_model=TaskResponse)
async def toggle_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await task_service.toggle_task(db, user.id, task_id)
    if task is None:
        raise _not_found()
    return task


@router.patch("/{task_id}/pomodoros", response_model=TaskResponse)
async def update_pomodoros(
    task_id: uuid.UUID,
    data: TaskPomodorosUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    task = await task_service.set_completed_pomodoros(
        db, user.id, task_id, data.completed_pomodoros
    )
    if task is None:
        raise _not_found()
    return task


@router.delete("/{task_id}")
async def delete_task(
    task_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    if not await task_service.delete_task(db, user.id, task_id):
        raise _not_found()
    return {"message": "Task deleted successfully"}
