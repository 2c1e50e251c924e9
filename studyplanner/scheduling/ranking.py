from typing import Any, Dict, Iterable, List, Optional

from .clock import TimestampLike
from .decay import decay_level, is_due_for_review, next_review_date
from .urgency import goal_urgency_score, topic_urgency_score

ACTIVE_STATUS = "active"


# ------------------------------------------------------------
# Goals
# ------------------------------------------------------------

def active_goals(goals: Iterable) -> List:
    return [g for g in goals if g.status == ACTIVE_STATUS]


def goal_urgency(goal, now: TimestampLike) -> int:
    return goal_urgency_score(goal.deadline, goal.priority, now)


def sort_goals_by_urgency(goals: Iterable, now: TimestampLike) -> List:
    """Most urgent first. Equal scores keep their input order."""
    return sorted(goals, key=lambda g: goal_urgency(g, now), reverse=True)


def most_urgent_goal(goals: Iterable, now: TimestampLike):
    """Most urgent *active* goal, or None when there is none."""
    ranked = sort_goals_by_urgency(active_goals(goals), now)
    return ranked[0] if ranked else None


# ------------------------------------------------------------
# Topics
# ------------------------------------------------------------

def topics_due_for_review(topics: Iterable, now: TimestampLike) -> List:
    return [
        t for t in topics
        if is_due_for_review(t.last_reviewed, t.review_count, now)
    ]


def sort_topics_by_urgency(topics: Iterable, now: TimestampLike) -> List:
    return sorted(topics, key=lambda t: topic_urgency_score(t, now), reverse=True)


# ------------------------------------------------------------
# Sessions
# ------------------------------------------------------------

def total_study_time_for_goal(goal_id: str, sessions: Iterable) -> int:
    return sum(s.duration_minutes for s in sessions if s.goal_id == goal_id)


# ------------------------------------------------------------
# Annotation (derived values, never stored)
# ------------------------------------------------------------

def annotate_topic(topic, now: TimestampLike) -> Dict[str, Any]:
    next_review = next_review_date(topic.last_reviewed, topic.review_count)

    data = topic.to_dict()
    data.update({
        "decayLevel": decay_level(topic.last_reviewed, topic.review_count, now).value,
        "nextReview": next_review.isoformat() if next_review else None,
        "isDue": is_due_for_review(topic.last_reviewed, topic.review_count, now),
        "urgencyScore": topic_urgency_score(topic, now),
    })
    return data


def annotate_goal(goal, now: TimestampLike, sessions: Optional[Iterable] = None) -> Dict[str, Any]:
    data = goal.to_dict()
    data["topics"] = [annotate_topic(t, now) for t in goal.topics]
    data["urgencyScore"] = goal_urgency(goal, now)

    if sessions is not None:
        data["totalStudyMinutes"] = total_study_time_for_goal(goal.id, sessions)

    return data
