from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import uuid

from ..scheduling.clock import to_utc

GOAL_TYPES = {"exam", "project", "commitment"}
GOAL_STATUSES = {"active", "completed", "archived"}

MIN_PRIORITY = 1
MAX_PRIORITY = 5


def _new_id() -> str:
    return str(uuid.uuid4())


def parse_deadline(value) -> date:
    """Accept a date, a datetime or an ISO string and keep its UTC calendar day."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return to_utc(value).date()


# ============================================================
# Topic
# ============================================================

@dataclass
class Topic:
    """
    A specific topic studied under a goal.

    `review_count` only ever grows; it selects the spaced-repetition
    interval. `last_reviewed` is None until the first session.
    """

    goal_id: str
    name: str

    last_reviewed: Optional[datetime] = None
    """UTC timestamp of the latest study session, or None."""

    review_count: int = 0
    mastery_level: int = 0
    """Self-assessed mastery in [0, 100]."""

    notes: str = ""
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        if self.last_reviewed is not None:
            self.last_reviewed = to_utc(self.last_reviewed)

        self.review_count = max(0, int(self.review_count))
        self.mastery_level = max(0, min(100, int(self.mastery_level)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "goalId": self.goal_id,
            "name": self.name,
            "lastReviewed": self.last_reviewed.isoformat() if self.last_reviewed else None,
            "reviewCount": self.review_count,
            "masteryLevel": self.mastery_level,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        return cls(
            id=data["id"],
            goal_id=data["goalId"],
            name=data["name"],
            last_reviewed=data.get("lastReviewed"),
            review_count=data.get("reviewCount", 0),
            mastery_level=data.get("masteryLevel", 0),
            notes=data.get("notes", ""),
        )


# ============================================================
# Goal
# ============================================================

@dataclass
class Goal:
    """
    A study goal, exam, project or commitment.

    Priority is fixed to 1–5 (5 = highest). The deadline may already
    be in the past; overdue goals stay active until closed.
    """

    title: str
    type: str
    deadline: date
    priority: int

    topics: List[Topic] = field(default_factory=list)
    status: str = "active"
    created_at: Optional[datetime] = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self):
        self.deadline = parse_deadline(self.deadline)

        if self.created_at is not None:
            self.created_at = to_utc(self.created_at)

    # ---------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------

    def find_topic(self, topic_id: str) -> Optional[Topic]:
        for topic in self.topics:
            if topic.id == topic_id:
                return topic
        return None

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    # ---------------------------------------------------------
    # Serialization
    # ---------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type,
            "deadline": self.deadline.isoformat(),
            "priority": self.priority,
            "topics": [t.to_dict() for t in self.topics],
            "status": self.status,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Goal":
        return cls(
            id=data["id"],
            title=data["title"],
            type=data["type"],
            deadline=data["deadline"],
            priority=data["priority"],
            topics=[Topic.from_dict(t) for t in data.get("topics", [])],
            status=data.get("status", "active"),
            created_at=data.get("createdAt"),
        )
