import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.database import get_db
from pomotrack.dependencies import get_current_user
from pomotrack.models.user import User
from pomotrack.schemas.session import (
    TimerSessionComplete,
    TimerSessionCreate,
    TimerSessionResponse,
)
from pomotrack.services import session_service

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.get("", response_model=list[TimerSessionResponse])
async def list_sessions(
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await session_service.get_sessions(db, user.id, limit=limit, offset=offset)


@router.post("", response_model=TimerSessionResponse, status_code=201)
async def create_session(
    data: TimerSessionCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    session = await session_service.create_session(db, user.id, data.model_dump())
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Task not found"
        )
    return session


@router.patch("/{session_id}/complete", response_model=TimerSessionResponse)
async def complete_session(
    session_id: uuid.UUID,
    data: TimerSessionComplete,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    try:
        session = await session_service.complete_session(
            db, user.id, session_id, end_time=data.end_time
        )
    except session_service.SessionAlreadyCompletedError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Session not found"
        )
    return session
