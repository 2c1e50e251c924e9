"""
Records owned by the storage layer.

The scheduling package only reads these; derived values (decay level,
next review, urgency) are computed on demand and never stored here.
"""

from .goal import Goal, Topic, GOAL_TYPES, GOAL_STATUSES
from .session import StudySession
from .daily_plan import DailyPlan, PlannedTask, TASK_TYPES
from .chat import ChatMessage, CHAT_ROLES
from .user_state import UserState

__all__ = [
    "Goal",
    "Topic",
    "GOAL_TYPES",
    "GOAL_STATUSES",
    "StudySession",
    "DailyPlan",
    "PlannedTask",
    "UserState",
    "ChatMessage",
    "CHAT_ROLES",
    "TASK_TYPES",
]
