"""
Memory-decay and urgency scheduling.

Pure functions of their inputs: every time-relative computation takes
an explicit reference clock `now` instead of reading the system clock.
"""

from .clock import days_between, to_utc
from .intervals import REVIEW_INTERVALS, spaced_repetition_interval
from .decay import DecayLevel, decay_level, is_due_for_review, next_review_date
from .urgency import goal_urgency_score, topic_urgency_score
from .ranking import (
    active_goals,
    annotate_goal,
    annotate_topic,
    most_urgent_goal,
    sort_goals_by_urgency,
    sort_topics_by_urgency,
    topics_due_for_review,
    total_study_time_for_goal,
)

__all__ = [
    "days_between",
    "to_utc",
    "REVIEW_INTERVALS",
    "spaced_repetition_interval",
    "DecayLevel",
    "decay_level",
    "is_due_for_review",
    "next_review_date",
    "goal_urgency_score",
    "topic_urgency_score",
    "active_goals",
    "annotate_goal",
    "annotate_topic",
    "most_urgent_goal",
    "sort_goals_by_urgency",
    "sort_topics_by_urgency",
    "topics_due_for_review",
    "total_study_time_for_goal",
]
