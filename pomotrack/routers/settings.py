from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.database import get_db
from pomotrack.dependencies import get_current_user
from pomotrack.models.user import User
from pomotrack.schemas.settings import SettingsUpdate, UserSettings
from pomotrack.services import settings_service

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UserSettings)
async def get_settings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await settings_service.get_settings(db, user.id)


@router.put("", response_model=UserSettings)
async def update_settings(
    data: SettingsUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await settings_service.update_settings(db, user.id, data)


@router.post("/reset", response_model=UserSettings)
async def reset_settings(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await settings_service.reset_settings(db, user.id)
