"""Service for finding free slots in an owner's agenda.

The horizon is swept one calendar day at a time. Within each day only the
working window (08:00-22:00 by default) is considered, and a cursor walks the
day's commitments in start order, emitting one slot at the start of every gap
that is long enough for the requested duration.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from dateutil.rrule import DAILY, rrule

from agenda.config import settings
from agenda.domain.errors import InvalidDuration, InvalidHorizon, InvalidRange, OwnerNotFound
from agenda.domain.models import Commitment, FreeSlot
from agenda.repos.source import CommitmentSource
from agenda.services.intervals import clip

logger = logging.getLogger(__name__)

WorkingHours = tuple[time, time]


def default_working_hours() -> WorkingHours:
    return settings.working_day_start, settings.working_day_end


def _validate(
    duration_minutes: int,
    horizon_days: int,
    working_hours: WorkingHours,
    max_horizon_days: int,
) -> None:
    if duration_minutes <= 0:
        raise InvalidDuration(f"duration must be positive, got {duration_minutes} minutes")
    if horizon_days <= 0 or horizon_days > max_horizon_days:
        raise InvalidHorizon(
            f"horizon must be between 1 and {max_horizon_days} days, got {horizon_days}"
        )
    day_start, day_end = working_hours
    if day_end <= day_start:
        raise InvalidRange(f"working hours end ({day_end}) must be after start ({day_start})")


def working_window(day: datetime, working_hours: WorkingHours) -> tuple[datetime, datetime]:
    """Return the [start, end) working window on *day*'s date."""
    return (
        datetime.combine(day.date(), working_hours[0], tzinfo=day.tzinfo),
        datetime.combine(day.date(), working_hours[1], tzinfo=day.tzinfo),
    )


def scan_day(
    day: datetime,
    duration: timedelta,
    commitments: list[Commitment],
    working_hours: WorkingHours,
) -> list[FreeSlot]:
    """Return the free slots of one day.

    *day* is any instant on the day to scan; *commitments* may contain entries
    from other days, they are filtered against the day's working window.
    """
    window_start, window_end = working_window(day, working_hours)

    busy: list[tuple[datetime, datetime]] = []
    for c in commitments:
        clipped = clip(c.start_time, c.end_time, window_start, window_end)
        if clipped is not None:
            busy.append(clipped)
    busy.sort()

    minutes = int(duration.total_seconds() // 60)
    slots: list[FreeSlot] = []
    cursor = window_start
    for busy_start, busy_end in busy:
        if cursor + duration <= busy_start:
            slots.append(
                FreeSlot(
                    start=cursor,
                    end=cursor + duration,
                    description=f"Free slot of {minutes} min",
                )
            )
        cursor = max(cursor, busy_end)

    if cursor + duration <= window_end:
        slots.append(
            FreeSlot(
                start=cursor,
                end=cursor + duration,
                description=f"Free slot of {minutes} min at end of day",
            )
        )
    return slots


def scan_free_slots(
    source: CommitmentSource,
    owner_id: str,
    search_start: datetime,
    duration_minutes: int,
    horizon_days: int,
    working_hours: WorkingHours | None = None,
    *,
    max_horizon_days: int | None = None,
) -> list[FreeSlot]:
    """Enumerate free slots of *duration_minutes* over *horizon_days* days.

    The sweep starts at midnight of *search_start*'s day. Commitments are read
    from *source* once for the whole horizon. Slots come back in chronological
    order.
    """
    working_hours = working_hours or default_working_hours()
    if max_horizon_days is None:
        max_horizon_days = settings.max_horizon_days
    _validate(duration_minutes, horizon_days, working_hours, max_horizon_days)
    if not source.resolve_owner(owner_id):
        raise OwnerNotFound(owner_id)

    first_day = datetime.combine(search_start.date(), time(), tzinfo=search_start.tzinfo)
    range_end = first_day + timedelta(days=horizon_days)
    duration = timedelta(minutes=duration_minutes)

    logger.info(
        "Scanning %d day(s) from %s for %d-minute slots for %s",
        horizon_days, first_day.date(), duration_minutes, owner_id,
    )
    commitments = source.list_commitments(owner_id, first_day, range_end)

    slots: list[FreeSlot] = []
    for day in rrule(DAILY, dtstart=first_day, count=horizon_days):
        day_slots = scan_day(day, duration, commitments, working_hours)
        logger.debug("%s: %d free slot(s)", day.date(), len(day_slots))
        slots.extend(day_slots)

    logger.info("%d free slot(s) found", len(slots))
    return slots
