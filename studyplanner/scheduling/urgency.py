import math

from .clock import TimestampLike, days_between
from .decay import DecayLevel, decay_level

# ------------------------------------------------------------
# Topic urgency
# ------------------------------------------------------------

DECAY_WEIGHTS = {
    DecayLevel.GREEN: 0,
    DecayLevel.YELLOW: 20,
    DecayLevel.ORANGE: 40,
    DecayLevel.RED: 60,
}

MASTERY_WEIGHT = 0.4

# ------------------------------------------------------------
# Goal urgency
# ------------------------------------------------------------

MAX_PRIORITY = 5
PRIORITY_POINTS = 50

# (max days until deadline, points); overdue deadlines score like the first band
DEADLINE_BANDS = (
    (7, 50),
    (14, 40),
    (30, 30),
    (60, 20),
)
DISTANT_DEADLINE_POINTS = 10


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def topic_urgency_score(topic, now: TimestampLike) -> int:
    """
    Sort key for topics: higher means review sooner.

    Staler decay levels weigh most; low mastery adds up to 40 points
    on top. `topic` needs `last_reviewed`, `review_count` and
    `mastery_level` attributes.
    """
    level = decay_level(topic.last_reviewed, topic.review_count, now)
    mastery = max(0, min(100, topic.mastery_level))

    return DECAY_WEIGHTS[level] + round_half_up((100 - mastery) * MASTERY_WEIGHT)


def deadline_points(days_until_deadline: int) -> int:
    if days_until_deadline < 0:
        return DEADLINE_BANDS[0][1]

    for max_days, points in DEADLINE_BANDS:
        if days_until_deadline <= max_days:
            return points

    return DISTANT_DEADLINE_POINTS


def goal_urgency_score(
    deadline: TimestampLike,
    priority: int,
    now: TimestampLike,
) -> int:
    """
    Urgency of a goal in [0, 100].

    Half comes from declared priority (1–5 scaled to 50 points), half
    from deadline proximity in day bands.
    """
    priority_score = round_half_up(priority / MAX_PRIORITY * PRIORITY_POINTS)
    time_score = deadline_points(days_between(now, deadline))

    return max(0, min(100, round_half_up(priority_score + time_score)))
