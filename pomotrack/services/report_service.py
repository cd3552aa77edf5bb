"""Report engine.

Resolves a period keyword to a window start and rolls the user's timer
sessions and tasks up into one report. Session aggregates are computed in
Python over the caller's qualifying rows: local calendar dates have no
portable SQL spelling across Postgres and SQLite. Task rollups and the
cross-user ranking stay in SQL, the latter through ``elapsed_seconds``.
"""
import logging
import math
import uuid
from collections import defaultdict
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from pomotrack.config import settings
from pomotrack.models.task import Task
from pomotrack.models.timer_session import POMODORO, TimerSession, as_utc, elapsed_seconds
from pomotrack.models.user import User

logger = logging.getLogger(__name__)

REPORT_PERIODS = ("day", "week", "month", "year")
RANKING_PERIODS = ("week", "month")
DEFAULT_PERIOD = "week"

# Streaks only look at the most recent 30 active days, so longer streaks are
# reported as 30.
STREAK_LOOKBACK_DAYS = 30
RANKING_LIMIT = 50


def report_timezone() -> ZoneInfo:
    return ZoneInfo(settings.REPORT_TIMEZONE)


def resolve_period(period: str | None, allowed: tuple[str, ...] = REPORT_PERIODS) -> str:
    """Unknown keywords fall back to the default period."""
    return period if period in allowed else DEFAULT_PERIOD


def resolve_period_start(
    period: str | None,
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> datetime:
    """Inclusive lower bound of the reporting window ending at ``now``."""
    tz = tz or report_timezone()
    now = as_utc(now or datetime.now(timezone.utc))
    period = resolve_period(period)

    if period == "day":
        return now.astimezone(tz).replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "month":
        return now.astimezone(tz) - relativedelta(months=1)
    if period == "year":
        return now.astimezone(tz) - relativedelta(years=1)
    # Rolling window, not aligned to calendar weeks
    return (now - timedelta(days=7)).astimezone(tz)


def local_date(value: datetime, tz: ZoneInfo) -> date:
    return as_utc(value).astimezone(tz).date()


def round_hours(minutes: float) -> float:
    """Minutes to hours, rounded half-up to one decimal."""
    hours = Decimal(str(minutes)) / Decimal(60)
    return float(hours.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def aggregate_timer_stats(sessions: Iterable[TimerSession]) -> dict[str, dict]:
    stats: dict[str, dict] = {}
    for session in sessions:
        if not session.counts_toward_reports:
            continue
        entry = stats.setdefault(
            session.type,
            {"count": 0, "total_duration": 0, "total_actual_duration": 0.0},
        )
        entry["count"] += 1
        entry["total_duration"] += session.duration
        entry["total_actual_duration"] += session.elapsed_minutes
    return stats


def aggregate_daily_focus(sessions: Iterable[TimerSession], tz: ZoneInfo) -> list[dict]:
    """Pomodoro hours per local start date, ascending. Idle days are absent."""
    buckets: dict[date, dict] = defaultdict(lambda: {"focus_hours": 0.0, "sessions": 0})
    for session in sessions:
        if session.type != POMODORO or not session.counts_toward_reports:
            continue
        bucket = buckets[local_date(session.start_time, tz)]
        bucket["focus_hours"] += session.elapsed_minutes / 60
        bucket["sessions"] += 1
    return [{"date": day, **bucket} for day, bucket in sorted(buckets.items())]


def calculate_streak(active_days: Iterable[date], today: date) -> int:
    """Consecutive days with a pomodoro, ending today.

    No activity today means no streak, even if yesterday was active.
    """
    days = sorted(set(active_days), reverse=True)[:STREAK_LOOKBACK_DAYS]
    streak = 0
    for day in days:
        if (today - day).days == streak:
            streak += 1
        else:
            break
    return streak


async def _completed_sessions(
    db: AsyncSession,
    user_id: uuid.UUID,
    since: datetime,
    session_type: str | None = None,
) -> list[TimerSession]:
    query = select(TimerSession).where(
        TimerSession.user_id == user_id,
        TimerSession.completed == True,  # noqa: E712
        TimerSession.end_time.is_not(None),
        TimerSession.start_time >= as_utc(since),
    )
    if session_type is not None:
        query = query.where(TimerSession.type == session_type)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_timer_stats(db: AsyncSession, user_id: uuid.UUID, since: datetime) -> dict[str, dict]:
    return aggregate_timer_stats(await _completed_sessions(db, user_id, since))


async def get_daily_stats(
    db: AsyncSession, user_id: uuid.UUID, since: datetime, tz: ZoneInfo
) -> list[dict]:
    sessions = await _completed_sessions(db, user_id, since, session_type=POMODORO)
    return aggregate_daily_focus(sessions, tz)


async def get_day_streak(
    db: AsyncSession, user_id: uuid.UUID, now: datetime, tz: ZoneInfo
) -> int:
    """Streak ending today, independent of the requested report period."""
    today = local_date(now, tz)
    # A day older than the lookback can never extend a streak that ends today.
    lookback_start = datetime.combine(
        today - timedelta(days=STREAK_LOOKBACK_DAYS), time.min, tzinfo=tz
    )
    sessions = await _completed_sessions(db, user_id, lookback_start, session_type=POMODORO)
    return calculate_streak((local_date(s.start_time, tz) for s in sessions), today)


def _task_rollup_columns():
    return (
        func.count(Task.id).label("total_tasks"),
        func.coalesce(
            func.sum(case((Task.completed == True, 1), else_=0)), 0  # noqa: E712
        ).label("completed_tasks"),
        func.coalesce(func.sum(Task.estimated_pomodoros), 0).label("total_pomodoros"),
        func.coalesce(func.sum(Task.completed_pomodoros), 0).label("completed_pomodoros"),
    )


def _rollup_dict(row) -> dict:
    return {
        "total_tasks": row.total_tasks or 0,
        "completed_tasks": row.completed_tasks or 0,
        "total_pomodoros": row.total_pomodoros or 0,
        "completed_pomodoros": row.completed_pomodoros or 0,
    }


async def get_task_stats(
    db: AsyncSession, user_id: uuid.UUID, since: datetime | None = None
) -> dict:
    """Task totals for tasks created since ``since`` (all time when None)."""
    query = select(*_task_rollup_columns()).where(Task.user_id == user_id)
    if since is not None:
        query = query.where(Task.created_at >= as_utc(since))
    result = await db.execute(query)
    return _rollup_dict(result.one())


async def get_project_stats(
    db: AsyncSession, user_id: uuid.UUID, since: datetime | None = None
) -> list[dict]:
    """Per-project task totals, largest project first."""
    query = select(Task.project, *_task_rollup_columns()).where(Task.user_id == user_id)
    if since is not None:
        query = query.where(Task.created_at >= as_utc(since))
    query = query.group_by(Task.project).order_by(func.count(Task.id).desc())
    result = await db.execute(query)
    return [{"project": row.project, **_rollup_dict(row)} for row in result.all()]


async def get_report(
    db: AsyncSession,
    user_id: uuid.UUID,
    period: str | None = DEFAULT_PERIOD,
    now: datetime | None = None,
) -> dict:
    """Assemble the full report. Any failing query aborts the whole report."""
    tz = report_timezone()
    now = as_utc(now or datetime.now(timezone.utc))
    period = resolve_period(period)
    start = resolve_period_start(period, now, tz)
    logger.debug("Building %s report for %s from %s", period, user_id, start.isoformat())

    timer_stats = await get_timer_stats(db, user_id, start)
    daily_stats = await get_daily_stats(db, user_id, start, tz)
    day_streak = await get_day_streak(db, user_id, now, tz)
    task_stats = await get_task_stats(db, user_id, start)
    project_stats = await get_project_stats(db, user_id, start)

    focus_minutes = timer_stats.get(POMODORO, {}).get("total_actual_duration", 0.0)

    return {
        "period": period,
        "start_date": start,
        "activity_summary": {
            "hours_focused": round_hours(focus_minutes),
            "days_accessed": len({day["date"] for day in daily_stats}),
            "day_streak": day_streak,
        },
        "timer_stats": timer_stats,
        "daily_stats": daily_stats,
        "task_stats": task_stats,
        "project_stats": project_stats,
    }


async def get_session_detail(
    db: AsyncSession,
    user_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    session_type: str | None = None,
) -> dict:
    """One page of completed sessions, newest first, with their linked task."""
    filters = [
        TimerSession.user_id == user_id,
        TimerSession.completed == True,  # noqa: E712
    ]
    if session_type:
        filters.append(TimerSession.type == session_type)
    if start_date:
        filters.append(TimerSession.start_time >= as_utc(start_date))
    if end_date:
        filters.append(TimerSession.start_time <= as_utc(end_date))

    total = (
        await db.execute(select(func.count(TimerSession.id)).where(*filters))
    ).scalar_one()

    result = await db.execute(
        select(TimerSession)
        .options(selectinload(TimerSession.task))
        .where(*filters)
        .order_by(TimerSession.start_time.desc())
        .limit(limit)
        .offset((page - 1) * limit)
    )

    return {
        "sessions": list(result.scalars().all()),
        "total_pages": math.ceil(total / limit),
        "current_page": page,
        "total": total,
    }


async def get_ranking(
    db: AsyncSession,
    period: str | None = DEFAULT_PERIOD,
    now: datetime | None = None,
) -> dict:
    """Top users by pomodoro minutes across everyone, not just the caller."""
    period = resolve_period(period, RANKING_PERIODS)
    since = resolve_period_start(period, now)

    total_seconds = func.sum(elapsed_seconds(TimerSession.start_time, TimerSession.end_time))
    result = await db.execute(
        select(TimerSession.user_id, total_seconds.label("total_seconds"))
        .where(
            TimerSession.type == POMODORO,
            TimerSession.completed == True,  # noqa: E712
            TimerSession.end_time.is_not(None),
            TimerSession.start_time >= as_utc(since),
        )
        .group_by(TimerSession.user_id)
        .order_by(total_seconds.desc())
        .limit(RANKING_LIMIT)
    )
    leaders = [(row.user_id, float(row.total_seconds) / 60) for row in result.all()]
    if not leaders:
        return {"period": period, "ranking": []}

    # Second read: attach display names for the users that made the cut
    users_result = await db.execute(
        select(User.id, User.username).where(User.id.in_([uid for uid, _ in leaders]))
    )
    usernames = {row.id: row.username for row in users_result.all()}

    return {
        "period": period,
        "ranking": [
            {"username": usernames.get(uid), "total_focus_time": total}
            for uid, total in leaders
        ],
    }
