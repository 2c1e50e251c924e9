from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import uuid

from ..scheduling.clock import to_utc


@dataclass
class StudySession:
    """A logged block of study time on one topic."""

    topic_id: str
    goal_id: str
    date: datetime
    duration_minutes: int
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        self.date = to_utc(self.date)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "topicId": self.topic_id,
            "goalId": self.goal_id,
            "date": self.date.isoformat(),
            "durationMinutes": self.duration_minutes,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudySession":
        return cls(
            id=data["id"],
            topic_id=data["topicId"],
            goal_id=data["goalId"],
            date=data["date"],
            duration_minutes=data["durationMinutes"],
            notes=data.get("notes", ""),
        )
