from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional

from ..models import Goal, Topic
from ..scheduling import active_goals, goal_urgency_score, sort_goals_by_urgency


@dataclass
class PlanningContext:
    """
    Inputs for one plan generation.

    Everything is evaluated against the same `now`, so the urgency
    shown in the prompt and the fallback ranking agree.
    """

    date: str
    """Day being planned (YYYY-MM-DD)."""

    now: datetime

    goals: List[Goal] = field(default_factory=list)
    """Active goals, most urgent first."""

    review_topics: List[Topic] = field(default_factory=list)
    """Topics due for review, most urgent first."""

    @classmethod
    def build(
        cls,
        date: str,
        now: datetime,
        goals: Iterable[Goal],
        review_topics: Iterable[Topic],
    ) -> "PlanningContext":
        return cls(
            date=date,
            now=now,
            goals=sort_goals_by_urgency(active_goals(goals), now),
            review_topics=list(review_topics),
        )

    def goal_urgency(self, goal: Goal) -> int:
        return goal_urgency_score(goal.deadline, goal.priority, self.now)

    def find_goal(self, goal_id: str) -> Optional[Goal]:
        for goal in self.goals:
            if goal.id == goal_id:
                return goal
        return None

    def find_topic(self, goal_id: str, topic_id: str) -> Optional[Topic]:
        goal = self.find_goal(goal_id)
        if goal is None:
            return None
        return goal.find_topic(topic_id)
