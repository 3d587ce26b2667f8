"""
Spaced Repetition System (SRS) algorithm - "doubling" intervals.

A card carries a single interval in days. Each review rating maps the
current interval to a new one; the next due time is the review time plus
the new interval. There are no ease factors and no randomness.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Optional, Tuple

# Interval caps in days
GOOD_MAX_INTERVAL_DAYS = 30
EASY_MAX_INTERVAL_DAYS = 60

# Growth factors
GOOD_MULTIPLIER = 2
EASY_MULTIPLIER = 3

INITIAL_INTERVAL_DAYS = 1


class Rating(IntEnum):
    """Review rating options for flashcard review."""
    WRONG = 1
    HARD = 2
    GOOD = 3
    EASY = 4


@dataclass
class SRSUpdate:
    """Result of an SRS calculation after a review."""
    interval_days: int
    due_at: datetime


def calculate_next_interval(current_interval_days: int, rating: Rating) -> int:
    """
    Map the current interval to the next one.

    Algorithm:
    - WRONG: Reset to 1 day
    - HARD: Keep current interval (floored at 1)
    - GOOD: Double, capped at 30 days
    - EASY: Triple, capped at 60 days
    """
    current = max(INITIAL_INTERVAL_DAYS, current_interval_days)

    if rating == Rating.WRONG:
        return INITIAL_INTERVAL_DAYS
    if rating == Rating.HARD:
        return current
    if rating == Rating.GOOD:
        return min(GOOD_MAX_INTERVAL_DAYS, current * GOOD_MULTIPLIER)
    return min(EASY_MAX_INTERVAL_DAYS, current * EASY_MULTIPLIER)


def calculate_next_review(
    current_interval_days: int,
    rating: Rating,
    reviewed_at: Optional[datetime] = None,
) -> SRSUpdate:
    """
    Calculate the next review state based on the rating.

    Args:
        current_interval_days: Interval the card currently has
        rating: The user's rating of their recall
        reviewed_at: Instant the review is recorded (defaults to now, UTC)

    Returns:
        SRSUpdate with the new interval and due time
    """
    if reviewed_at is None:
        reviewed_at = datetime.now(timezone.utc)

    new_interval = calculate_next_interval(current_interval_days, Rating(rating))

    return SRSUpdate(
        interval_days=new_interval,
        due_at=reviewed_at + timedelta(days=new_interval),
    )


def get_interval_display(interval_days: int) -> str:
    """
    Convert an interval in days to human-readable format.

    Args:
        interval_days: Interval in days

    Returns:
        Human-readable string (e.g., "1 day", "2 weeks", "2 months")
    """
    if interval_days < 7:
        return f"{interval_days} day{'s' if interval_days != 1 else ''}"
    elif interval_days < 30:
        weeks = interval_days // 7
        return f"{weeks} week{'s' if weeks != 1 else ''}"
    else:
        months = interval_days // 30
        return f"{months} month{'s' if months != 1 else ''}"


def get_initial_srs_state(now: Optional[datetime] = None) -> Tuple[int, datetime]:
    """
    Get initial SRS state for a new flashcard: due immediately, 1-day interval.

    Returns:
        Tuple of (interval_days, due_at)
    """
    return (
        INITIAL_INTERVAL_DAYS,
        now if now is not None else datetime.now(timezone.utc),
    )
