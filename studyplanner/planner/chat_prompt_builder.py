from datetime import datetime
from typing import List

from ..models import ChatMessage, Goal, Topic
from ..scheduling import decay_level, goal_urgency_score


class ChatPromptBuilder:
    """
    Builds the study-chat prompt: the student's current goals and due
    topics, the recent conversation, then the new message.
    """

    def __init__(self, history_turns: int = 10):
        self.history_turns = history_turns

    def build(
        self,
        message: str,
        now: datetime,
        goals: List[Goal],
        review_topics: List[Topic],
        history: List[ChatMessage],
    ) -> str:

        goal_lines = [
            f"- {g.title} ({g.type}, deadline {g.deadline.isoformat()}, "
            f"urgency {goal_urgency_score(g.deadline, g.priority, now)}/100)"
            for g in goals
        ]

        review_lines = [
            f"- {t.name} (decay: {decay_level(t.last_reviewed, t.review_count, now).value}, "
            f"mastery {t.mastery_level}%)"
            for t in review_topics
        ]

        # One turn is a user message plus its reply
        recent = history[-2 * self.history_turns:] if self.history_turns > 0 else []
        transcript = "\n".join(
            f"{'Student' if m.role == 'user' else 'Coach'}: {m.content}"
            for m in recent
        )

        goals_block = "\n".join(goal_lines) or "(none)"
        review_block = "\n".join(review_lines) or "(none)"

        return f"""
Today is {now.date().isoformat()}.

Student goals (most urgent first):
{goals_block}

Topics due for review:
{review_block}

Conversation so far:
{transcript or "(new conversation)"}

Student: {message}
Coach:
""".strip()
