import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.models.task import Task

logger = logging.getLogger(__name__)


async def get_tasks(
    db: AsyncSession,
    user_id: uuid.UUID,
    completed: bool | None = None,
    project: str | None = None,
    priority: str | None = None,
) -> list[Task]:
    query = select(Task).where(Task.user_id == user_id)
    if completed is not None:
        query = query.where(Task.completed == completed)
    if project:
        query = query.where(Task.project == project)
    if priority:
        query = query.where(Task.priority == priority)
    query = query.order_by(Task.created_at.desc())
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> Task | None:
    result = await db.execute(
        select(Task).where(Task.id == task_id, Task.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def create_task(db: AsyncSession, user_id: uuid.UUID, data: dict) -> Task:
    task = Task(user_id=user_id, **data)
    db.add(task)
    await db.flush()
    await db.refresh(task)
    return task


async def _save(db: AsyncSession, task: Task) -> Task:
    task.updated_at = datetime.now(timezone.utc)
    await db.flush()
    await db.refresh(task)
    return task


async def update_task(
    db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID, data: dict
) -> Task | None:
    task = await get_task(db, user_id, task_id)
    if task is None:
        return None

    for key, value in data.items():
        if value is not None:
            setattr(task, key, value)
    return await _save(db, task)


async def toggle_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> Task | None:
    """Flip completion; completed_at is kept set exactly when completed."""
    task = await get_task(db, user_id, task_id)
    if task is None:
        return None

    task.completed = not task.completed
    task.completed_at = datetime.now(timezone.utc) if task.completed else None
    return await _save(db, task)


async def set_completed_pomodoros(
    db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID, completed_pomodoros: int
) -> Task | None:
    task = await get_task(db, user_id, task_id)
    if task is None:
        return None

    if completed_pomodoros > task.estimated_pomodoros:
        logger.info(
            "Task %s has %d pomodoros logged against an estimate of %d",
            task_id, completed_pomodoros, task.estimated_pomodoros,
        )
    task.completed_pomodoros = completed_pomodoros
    return await _save(db, task)


async def delete_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> bool:
    task = await get_task(db, user_id, task_id)
    if task is None:
        return False

    await db.delete(task)
    await db.flush()
    return True
