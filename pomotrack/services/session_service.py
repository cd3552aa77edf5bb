import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.models.task import Task
from pomotrack.models.timer_session import TimerSession, as_utc

logger = logging.getLogger(__name__)


class SessionAlreadyCompletedError(ValueError):
    """Completed sessions are immutable."""


async def get_sessions(
    db: AsyncSession,
    user_id: uuid.UUID,
    limit: int = 50,
    offset: int = 0,
) -> list[TimerSession]:
    query = (
        select(TimerSession)
        .where(TimerSession.user_id == user_id)
        .order_by(TimerSession.start_time.desc())
        .limit(limit)
        .offset(offset)
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def _owns_task(db: AsyncSession, user_id: uuid.UUID, task_id: uuid.UUID) -> bool:
    result = await db.execute(
        select(Task.id).where(Task.id == task_id, Task.user_id == user_id)
    )
    return result.scalar_one_or_none() is not None


async def create_session(
    db: AsyncSession, user_id: uuid.UUID, data: dict
) -> TimerSession | None:
    """Record a timer run. Returns None when the linked task isn't the user's."""
    task_id = data.get("task_id")
    if task_id is not None and not await _owns_task(db, user_id, task_id):
        return None

    data["start_time"] = as_utc(data["start_time"])
    if data.get("end_time") is not None:
        data["end_time"] = as_utc(data["end_time"])

    session = TimerSession(user_id=user_id, **data)
    db.add(session)
    await db.flush()
    await db.refresh(session)
    return session


async def complete_session(
    db: AsyncSession,
    user_id: uuid.UUID,
    session_id: uuid.UUID,
    end_time: datetime | None = None,
) -> TimerSession | None:
    """Stamp the end of a running session and mark it completed."""
    result = await db.execute(
        select(TimerSession).where(
            TimerSession.id == session_id, TimerSession.user_id == user_id
        )
    )
    session = result.scalar_one_or_none()
    if session is None:
        return None

    if session.completed:
        logger.warning("Rejected re-completion of session %s", session_id)
        raise SessionAlreadyCompletedError("Session already completed")

    end_time = as_utc(end_time or datetime.now(timezone.utc))
    if end_time < as_utc(session.start_time):
        raise ValueError("end_time must not precede start_time")

    session.end_time = end_time
    session.completed = True
    session.updated_at = datetime.now(timezone.utc)

    await db.flush()
    await db.refresh(session)
    return session
