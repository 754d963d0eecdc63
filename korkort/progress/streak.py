"""
Study streak derivation.

Days are measured as whole 24-hour periods between the two instants,
not as calendar-date boundaries:

    diff_days = floor((now - last_study_time) / 24h)

    0 or 1 day  -> streak + 1
    > 1 day     -> streak resets to 1
    no history  -> streak starts at 1
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta

from loguru import logger

from korkort.progress.models import StudyStreak

ONE_DAY = timedelta(days=1)


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole 24-hour periods from earlier to later (may be negative)."""
    return math.floor((later - earlier) / ONE_DAY)


def update_streak(streak: StudyStreak, now: datetime) -> StudyStreak:
    """
    Apply one study event to a streak.

    Args:
        streak: Streak before the event
        now: Instant of the study event

    Returns:
        New StudyStreak with last_study_time set to now
    """
    if streak.last_study_time is None:
        new_streak = 1
    else:
        diff_days = days_between(streak.last_study_time, now)
        if diff_days > 1:
            new_streak = 1
        else:
            # A negative gap means the clock moved backwards; count it as same-day.
            new_streak = streak.current_streak + 1

    logger.debug(
        "Streak update: {} -> {} (last study {})",
        streak.current_streak,
        new_streak,
        streak.last_study_time,
    )
    return StudyStreak(current_streak=new_streak, last_study_time=now)
