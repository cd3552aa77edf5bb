from datetime import datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.database import get_db
from pomotrack.dependencies import get_current_user
from pomotrack.models.user import User
from pomotrack.schemas.report import RankingResponse, ReportResponse, SessionDetailResponse
from pomotrack.services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("", response_model=ReportResponse)
async def get_report(
    period: str = Query(default="week"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Activity summary for the caller. Unknown periods fall back to "week"."""
    return await report_service.get_report(db, user.id, period=period)


@router.get("/detail", response_model=SessionDetailResponse)
async def get_detail(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    session_type: str | None = Query(
        default=None, alias="type", pattern="^(pomodoro|short-break|long-break)$"
    ),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await report_service.get_session_detail(
        db, user.id, page=page, limit=limit,
        start_date=start_date, end_date=end_date, session_type=session_type,
    )


@router.get("/ranking", response_model=RankingResponse)
async def get_ranking(
    period: str = Query(default="week"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await report_service.get_ranking(db, period=period)
