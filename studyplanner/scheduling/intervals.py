from typing import Tuple

# Review interval in days, indexed by review count (last entry repeats)
REVIEW_INTERVALS: Tuple[int, ...] = (1, 3, 7, 14, 30)


def spaced_repetition_interval(review_count: int) -> int:
    """
    Days until the next review for a topic reviewed `review_count` times.

    0 → 1, 1 → 3, 2 → 7, 3 → 14, 4+ → 30.
    """
    if review_count <= 0:
        return REVIEW_INTERVALS[0]

    return REVIEW_INTERVALS[min(review_count, len(REVIEW_INTERVALS) - 1)]
