from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from .clock import TimestampLike, days_between, to_utc
from .intervals import spaced_repetition_interval


class DecayLevel(str, Enum):
    """
    Presumed staleness of a topic, from fresh to urgent.

    Ordering follows declaration order, so levels can be compared
    through `severity`.
    """

    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {
    DecayLevel.GREEN: 0,
    DecayLevel.YELLOW: 1,
    DecayLevel.ORANGE: 2,
    DecayLevel.RED: 3,
}

# Band upper bounds as a fraction of the topic's own interval
GREEN_RATIO = 0.5
YELLOW_RATIO = 1.0
ORANGE_RATIO = 1.5


def decay_level(
    last_reviewed: Optional[TimestampLike],
    review_count: int,
    now: TimestampLike,
) -> DecayLevel:
    """
    Classify how stale a topic is relative to its review interval.

    Never-reviewed topics are always RED. Otherwise the whole days
    elapsed since the last review are compared against 0.5×, 1.0× and
    1.5× the spaced-repetition interval; each band includes its lower
    bound.
    """
    if last_reviewed is None:
        return DecayLevel.RED

    days_since = days_between(last_reviewed, now)
    interval = spaced_repetition_interval(review_count)

    if days_since < interval * GREEN_RATIO:
        return DecayLevel.GREEN

    if days_since < interval * YELLOW_RATIO:
        return DecayLevel.YELLOW

    if days_since < interval * ORANGE_RATIO:
        return DecayLevel.ORANGE

    return DecayLevel.RED


def next_review_date(
    last_reviewed: Optional[TimestampLike],
    review_count: int,
) -> Optional[datetime]:
    """Last review plus the interval, in UTC calendar days. None if never reviewed."""
    if last_reviewed is None:
        return None

    interval = spaced_repetition_interval(review_count)
    return to_utc(last_reviewed) + timedelta(days=interval)


def is_due_for_review(
    last_reviewed: Optional[TimestampLike],
    review_count: int,
    now: TimestampLike,
) -> bool:
    next_review = next_review_date(last_reviewed, review_count)

    # Never reviewed → always due
    if next_review is None:
        return True

    return to_utc(now) >= next_review
