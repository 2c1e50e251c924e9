from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterator, List

from ..scheduling.clock import to_utc

TASK_TYPES = {"study", "review", "project_work"}


# ============================================================
# PlannedTask
# ============================================================

@dataclass
class PlannedTask:
    """
    One entry of a daily plan: what to work on and why.
    """

    topic_id: str
    goal_id: str
    type: str
    estimated_minutes: int
    priority: int = 3
    """Task priority in range [1, 5]. Out-of-range values are clamped."""

    reasoning: str = ""

    def __post_init__(self):
        try:
            self.priority = int(self.priority)
        except (TypeError, ValueError, OverflowError):
            self.priority = 3

        self.priority = max(1, min(5, self.priority))

        try:
            self.estimated_minutes = max(0, int(self.estimated_minutes))
        except (TypeError, ValueError, OverflowError):
            self.estimated_minutes = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topicId": self.topic_id,
            "goalId": self.goal_id,
            "type": self.type,
            "estimatedMinutes": self.estimated_minutes,
            "priority": self.priority,
            "reasoning": self.reasoning,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannedTask":
        return cls(
            topic_id=data["topicId"],
            goal_id=data["goalId"],
            type=data["type"],
            estimated_minutes=data["estimatedMinutes"],
            priority=data.get("priority", 3),
            reasoning=data.get("reasoning", ""),
        )


# ============================================================
# DailyPlan
# ============================================================

@dataclass
class DailyPlan:
    """
    Task list for a single calendar day.

    Plans are keyed by `date` (YYYY-MM-DD); regenerating a day
    replaces the stored plan.
    """

    date: str
    generated_at: datetime
    tasks: List[PlannedTask] = field(default_factory=list)
    reasoning: str = ""

    meta: Dict[str, Any] = field(default_factory=dict)
    """
    Planner metadata, e.g.:
    • planner name
    • model
    • fallback flag and reason
    """

    def __post_init__(self):
        self.generated_at = to_utc(self.generated_at)

    def is_empty(self) -> bool:
        return len(self.tasks) == 0

    def __iter__(self) -> Iterator[PlannedTask]:
        return iter(self.tasks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "generatedAt": self.generated_at.isoformat(),
            "tasks": [t.to_dict() for t in self.tasks],
            "reasoning": self.reasoning,
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DailyPlan":
        return cls(
            date=data["date"],
            generated_at=data["generatedAt"],
            tasks=[PlannedTask.from_dict(t) for t in data.get("tasks", [])],
            reasoning=data.get("reasoning", ""),
            meta=data.get("meta", {}),
        )

