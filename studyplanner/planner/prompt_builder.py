from ..scheduling import decay_level
from .context import PlanningContext


class PlannerPromptBuilder:
    """
    Responsible for constructing the daily planning prompt.
    """

    def __init__(self, min_tasks: int = 3, max_tasks: int = 5):
        self.min_tasks = min_tasks
        self.max_tasks = max_tasks

    def build(self, context: PlanningContext) -> str:

        goal_lines = []
        for g in context.goals:
            goal_lines.append(
                f"- [{g.id}] {g.title} ({g.type}, priority {g.priority}, "
                f"deadline: {g.deadline.isoformat()}, urgency {context.goal_urgency(g)}/100)"
            )
            for t in g.topics:
                goal_lines.append(f"    - topic [{t.id}] {t.name} (mastery {t.mastery_level}%)")

        review_lines = [
            f"- [{t.id}] {t.name} (goal: {t.goal_id}, "
            f"decay: {decay_level(t.last_reviewed, t.review_count, context.now).value}, "
            f"reviews: {t.review_count})"
            for t in context.review_topics
        ]

        goals_block = "\n".join(goal_lines) or "(none)"
        review_block = "\n".join(review_lines) or "(none)"

        return f"""
You are an AI study planner. Generate a daily study plan for {context.date}.

Active Goals (most urgent first):
{goals_block}

Topics Needing Review (most urgent first):
{review_block}

Generate a focused daily plan with {self.min_tasks}-{self.max_tasks} tasks. For each task, provide:
- topicId: the topic ID (must be one of the IDs above)
- goalId: the goal ID the topic belongs to
- type: 'study', 'review', or 'project_work'
- estimatedMinutes: estimated time in minutes
- priority: 1-5
- reasoning: why this task is important

Return a JSON object with:
- reasoning: Your overall explanation for this plan
- tasks: Array of task objects

Format your response as valid JSON only.
""".strip()
