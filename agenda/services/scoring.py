"""Scoring and ranking of candidate free slots."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import TYPE_CHECKING

from agenda.domain.enums import TimeBracket

if TYPE_CHECKING:
    from agenda.domain.models import FreeSlot

RECOMMENDED_THRESHOLD = 80
MAX_SCORE = 100

# Monday=0 .. Sunday=6
_WEEKDAY_BONUS = {0: 20, 1: 20, 2: 20, 3: 20, 4: 15, 5: 10, 6: 10}

_BRACKET_BONUS = {
    TimeBracket.MORNING: 30,
    TimeBracket.AFTERNOON: 35,
    TimeBracket.EVENING: 25,
    TimeBracket.OFF_HOURS: 5,
}

# (max hours of distance, proximity score), checked in order
_PROXIMITY_STEPS = [(24, 80), (48, 60), (72, 40)]
_FAR_PROXIMITY = 20


def time_bracket(hour: int) -> TimeBracket:
    """Map a start hour to its time-of-day bracket.

    The evening bracket includes 22h so a slot starting exactly at the end of
    the default working day is still an evening slot.
    """
    if 8 <= hour < 12:
        return TimeBracket.MORNING
    if 12 <= hour < 17:
        return TimeBracket.AFTERNOON
    if 17 <= hour <= 22:
        return TimeBracket.EVENING
    return TimeBracket.OFF_HOURS


def _duration_bonus(duration_minutes: int) -> int:
    if 60 <= duration_minutes <= 240:
        return 25
    if 30 <= duration_minutes < 60:
        return 15
    return 5


def quality_score(
    weekday: int,
    bracket: TimeBracket,
    duration_minutes: int,
    proximity_score: int,
) -> int:
    """Combine weekday, bracket, duration fit and proximity into a 0-100 score."""
    score = _WEEKDAY_BONUS[weekday]
    score += _BRACKET_BONUS[bracket]
    score += _duration_bonus(duration_minutes)
    score += min(proximity_score // 4, 25)
    return min(score, MAX_SCORE)


def is_recommended(proximity_score: int) -> bool:
    return proximity_score >= RECOMMENDED_THRESHOLD


def hours_between(a: datetime, b: datetime) -> int:
    """Absolute distance between two instants in whole hours (truncated)."""
    return int(abs(b - a).total_seconds() // 3600)


def proximity_score(desired_start: datetime, slot_start: datetime) -> int:
    """Score how close a slot starts to the originally desired start."""
    distance = hours_between(desired_start, slot_start)
    for max_hours, score in _PROXIMITY_STEPS:
        if distance <= max_hours:
            return score
    return _FAR_PROXIMITY


def rank_by_proximity(
    slots: Sequence[FreeSlot], desired_start: datetime, limit: int = 5
) -> list[FreeSlot]:
    """Order slots by distance from *desired_start* and keep the closest *limit*.

    The sort is stable, so slots at the same whole-hour distance keep their
    chronological scan order.
    """
    ranked = sorted(slots, key=lambda s: hours_between(desired_start, s.start))
    return ranked[:limit]


def take_chronological(slots: Sequence[FreeSlot], limit: int = 10) -> list[FreeSlot]:
    """Keep the first *limit* slots in scan order."""
    return list(slots[:limit])
