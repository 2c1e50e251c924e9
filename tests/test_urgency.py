from datetime import date, timedelta

import pytest

from studyplanner.scheduling import goal_urgency_score, topic_urgency_score

from conftest import NOW, make_topic


# ------------------------------------------------------------
# Goal urgency
# ------------------------------------------------------------

def test_close_deadline_and_top_priority_scores_100():
    assert goal_urgency_score(date(2024, 1, 18), 5, NOW) == 100


def test_distant_deadline_and_lowest_priority_scores_20():
    assert goal_urgency_score(date(2024, 4, 15), 1, NOW) == 20


@pytest.mark.parametrize(
    "days_until, time_points",
    [
        (-30, 50),
        (-1, 50),
        (0, 50),
        (7, 50),
        (8, 40),
        (14, 40),
        (15, 30),
        (30, 30),
        (31, 20),
        (60, 20),
        (61, 10),
        (365, 10),
    ],
)
def test_deadline_bands(days_until, time_points):
    deadline = NOW.date() + timedelta(days=days_until)
    # priority 3 contributes 30 points
    assert goal_urgency_score(deadline, 3, NOW) == 30 + time_points


def test_partial_days_until_deadline_are_floored():
    # 7.5 days away still counts as 7
    assert goal_urgency_score("2024-01-22T12:00:00Z", 1, NOW) == 60


@pytest.mark.parametrize("priority", range(1, 6))
@pytest.mark.parametrize("days_until", [-10, 0, 5, 10, 20, 45, 90])
def test_score_stays_in_range(priority, days_until):
    deadline = NOW.date() + timedelta(days=days_until)
    assert 0 <= goal_urgency_score(deadline, priority, NOW) <= 100


@pytest.mark.parametrize("days_until", [0, 9, 20, 40, 100])
def test_higher_priority_never_lowers_score(days_until):
    deadline = NOW.date() + timedelta(days=days_until)
    scores = [goal_urgency_score(deadline, p, NOW) for p in range(1, 6)]
    assert scores == sorted(scores)


@pytest.mark.parametrize("priority", range(1, 6))
def test_closer_deadline_never_lowers_score(priority):
    scores = [
        goal_urgency_score(NOW.date() + timedelta(days=d), priority, NOW)
        for d in range(120, -1, -1)
    ]
    assert scores == sorted(scores)


def test_out_of_range_priority_is_clamped_not_raised():
    assert goal_urgency_score(date(2024, 1, 16), 9, NOW) == 100
    assert goal_urgency_score(date(2024, 9, 1), -10, NOW) == 0


# ------------------------------------------------------------
# Topic urgency
# ------------------------------------------------------------

def test_never_reviewed_topic_scores_high():
    topic = make_topic(mastery_level=50)
    assert topic_urgency_score(topic, NOW) > 50


def test_fresh_well_known_topic_scores_low():
    topic = make_topic(last_reviewed=NOW - timedelta(days=1), review_count=5, mastery_level=90)
    assert topic_urgency_score(topic, NOW) < 50


def test_staler_topic_is_more_urgent_at_equal_mastery():
    levels = [
        make_topic(last_reviewed=NOW - timedelta(days=d), review_count=2, mastery_level=40)
        for d in (0, 4, 8, 12)
    ]
    scores = [topic_urgency_score(t, NOW) for t in levels]
    assert scores == sorted(scores)
    assert len(set(scores)) == 4


def test_lower_mastery_is_more_urgent_at_equal_decay():
    scores = [
        topic_urgency_score(make_topic(mastery_level=m), NOW)
        for m in (100, 75, 50, 25, 0)
    ]
    assert scores == sorted(scores)
