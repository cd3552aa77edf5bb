from pomotrack.models.base import Base
from pomotrack.models.task import Task
from pomotrack.models.timer_session import TimerSession
from pomotrack.models.user import User

__all__ = [
    "Base",
    "Task",
    "TimerSession",
    "User",
]
