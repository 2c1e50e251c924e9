from datetime import datetime, timezone

import pytest

from studyplanner.models import Goal, Topic

NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)


def make_topic(name="Topic", goal_id="g1", last_reviewed=None, review_count=0, mastery_level=0, **kwargs):
    return Topic(
        goal_id=goal_id,
        name=name,
        last_reviewed=last_reviewed,
        review_count=review_count,
        mastery_level=mastery_level,
        **kwargs,
    )


def make_goal(title="Goal", deadline="2024-02-15", priority=3, status="active", topics=None, **kwargs):
    return Goal(
        title=title,
        type="exam",
        deadline=deadline,
        priority=priority,
        status=status,
        topics=topics or [],
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW
