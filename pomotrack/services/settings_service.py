"""Per-user timer/task/sound/theme/notification preferences.

Settings live on ``User.settings_json`` but are always read and written
through the typed ``UserSettings`` model. Partial updates go through
``SECTION_UPDATERS``, one named operation per top-level section.
"""
import logging
import uuid
from collections.abc import Callable

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from pomotrack.models.user import User
from pomotrack.schemas.settings import SettingsUpdate, UserSettings

logger = logging.getLogger(__name__)

SectionUpdater = Callable[[UserSettings, object], UserSettings]


def _merge_section(name: str) -> SectionUpdater:
    def apply(current: UserSettings, changes: BaseModel) -> UserSettings:
        section: BaseModel = getattr(current, name)
        fields = changes.model_dump(exclude_none=True)
        return current.model_copy(update={name: section.model_copy(update=fields)})

    apply.__name__ = f"update_{name}"
    return apply


def _set_theme(current: UserSettings, theme: str) -> UserSettings:
    return current.model_copy(update={"theme": theme})


SECTION_UPDATERS: dict[str, SectionUpdater] = {
    "timer": _merge_section("timer"),
    "task": _merge_section("task"),
    "sound": _merge_section("sound"),
    "theme": _set_theme,
    "notifications": _merge_section("notifications"),
}


def load_settings(user: User) -> UserSettings:
    return UserSettings.model_validate(user.settings_json or {})


def apply_update(current: UserSettings, update: SettingsUpdate) -> UserSettings:
    """Apply every section present in ``update``; absent sections are untouched."""
    for name, updater in SECTION_UPDATERS.items():
        changes = getattr(update, name)
        if changes is not None:
            current = updater(current, changes)
    return current


async def _store(db: AsyncSession, user: User, value: UserSettings) -> UserSettings:
    user.settings_json = value.model_dump()
    await db.flush()
    return value


async def _load_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await db.get(User, user_id)
    if user is None:
        raise LookupError(f"User {user_id} not found")
    return user


async def get_settings(db: AsyncSession, user_id: uuid.UUID) -> UserSettings:
    """Current settings; defaults are written back the first time they're read."""
    user = await _load_user(db, user_id)
    if user.settings_json is None:
        return await _store(db, user, UserSettings())
    return load_settings(user)


async def update_settings(
    db: AsyncSession, user_id: uuid.UUID, update: SettingsUpdate
) -> UserSettings:
    user = await _load_user(db, user_id)
    updated = apply_update(load_settings(user), update)
    logger.debug("Updating settings for %s: %s", user_id, update.model_dump(exclude_none=True))
    return await _store(db, user, updated)


async def reset_settings(db: AsyncSession, user_id: uuid.UUID) -> UserSettings:
    user = await _load_user(db, user_id)
    return await _store(db, user, UserSettings())
