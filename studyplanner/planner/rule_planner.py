from ..models import DailyPlan, PlannedTask
from .context import PlanningContext
from .interface import DailyPlanner

REVIEW_MINUTES = 30
REVIEW_PRIORITY = 3


class RuleBasedPlanner(DailyPlanner):
    """
    Deterministic baseline planner.

    Schedules a review of the most urgent due topics. Used when no LLM
    planner is configured and as the LLM planner's fallback.
    """

    def __init__(self, task_count: int = 3):
        self.task_count = task_count

    def generate_plan(self, context: PlanningContext, reason: str = "") -> DailyPlan:

        tasks = [
            PlannedTask(
                topic_id=topic.id,
                goal_id=topic.goal_id,
                type="review",
                estimated_minutes=REVIEW_MINUTES,
                priority=REVIEW_PRIORITY,
                reasoning=f"Review {topic.name} to maintain retention",
            )
            for topic in context.review_topics[:self.task_count]
        ]

        if reason:
            reasoning = f"Generated a basic study plan. {reason}"
        else:
            reasoning = "Review the most urgent topics due today."

        meta = {"planner": self.name}
        if reason:
            meta.update({"fallback": True, "reason": reason})

        return DailyPlan(
            date=context.date,
            generated_at=context.now,
            tasks=tasks,
            reasoning=reasoning,
            meta=meta,
        )
