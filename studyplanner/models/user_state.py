from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..scheduling.clock import to_utc
from .goal import Goal
from .session import StudySession
from .daily_plan import DailyPlan
from .chat import ChatMessage


@dataclass
class UserState:
    """Everything stored for one user."""

    user_id: str
    goals: List[Goal] = field(default_factory=list)
    sessions: List[StudySession] = field(default_factory=list)
    daily_plans: List[DailyPlan] = field(default_factory=list)
    last_plan_generated: Optional[datetime] = None
    chat_history: List[ChatMessage] = field(default_factory=list)

    def find_goal(self, goal_id: str) -> Optional[Goal]:
        for goal in self.goals:
            if goal.id == goal_id:
                return goal
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "goals": [g.to_dict() for g in self.goals],
            "sessions": [s.to_dict() for s in self.sessions],
            "dailyPlans": [p.to_dict() for p in self.daily_plans],
            "lastPlanGenerated": (
                self.last_plan_generated.isoformat()
                if self.last_plan_generated else None
            ),
            "chatHistory": [m.to_dict() for m in self.chat_history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserState":
        last = data.get("lastPlanGenerated")
        return cls(
            user_id=data["userId"],
            goals=[Goal.from_dict(g) for g in data.get("goals", [])],
            sessions=[StudySession.from_dict(s) for s in data.get("sessions", [])],
            daily_plans=[DailyPlan.from_dict(p) for p in data.get("dailyPlans", [])],
            last_plan_generated=to_utc(last) if last else None,
            chat_history=[ChatMessage.from_dict(m) for m in data.get("chatHistory", [])],
        )
