"""Agenda façade: conflict checks, free-slot proposals and weekly summaries."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from dateutil.rrule import DAILY, rrule

from agenda.config import Settings
from agenda.config import settings as default_settings
from agenda.domain.enums import CheckKind
from agenda.domain.errors import InvalidLimit, OwnerNotFound
from agenda.domain.models import AgendaSummary, ConflictReport, FreeSlot
from agenda.repos.source import CommitmentSource
from agenda.services.conflicts import detect_conflicts
from agenda.services.intervals import clip, require_range, union_minutes
from agenda.services.scoring import proximity_score, rank_by_proximity, take_chronological
from agenda.services.slots import WorkingHours, scan_free_slots, working_window

logger = logging.getLogger(__name__)

SUMMARY_DAYS = 7


def _require_limit(limit: int) -> None:
    if limit <= 0:
        raise InvalidLimit(f"limit must be positive, got {limit}")


class AgendaService:
    """Runs the agenda operations against an organizer and a participant source.

    *organizer_source* yields an organizer's own events, *participant_source*
    a participant's confirmed bookings. Both are read once per call.
    """

    def __init__(
        self,
        organizer_source: CommitmentSource,
        participant_source: CommitmentSource | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.organizer_source = organizer_source
        self.participant_source = participant_source or organizer_source
        self.settings = settings or default_settings

    @property
    def working_hours(self) -> WorkingHours:
        return self.settings.working_day_start, self.settings.working_day_end

    # ------------------------------------------------------------------
    # Conflicts
    # ------------------------------------------------------------------

    def check_organizer_conflicts(
        self, owner_id: str, start: datetime, end: datetime
    ) -> ConflictReport:
        return detect_conflicts(
            self.organizer_source, owner_id, start, end, CheckKind.ORGANIZER
        )

    def check_participant_conflicts(
        self, user_id: str, start: datetime, end: datetime
    ) -> ConflictReport:
        return detect_conflicts(
            self.participant_source, user_id, start, end, CheckKind.PARTICIPANT
        )

    def is_period_free(self, owner_id: str, start: datetime, end: datetime) -> bool:
        return not self.check_organizer_conflicts(owner_id, start, end).conflict_detected

    # ------------------------------------------------------------------
    # Free slots
    # ------------------------------------------------------------------

    def propose_free_slots(
        self,
        owner_id: str,
        start: datetime,
        end: datetime,
        duration_minutes: int,
        limit: int | None = None,
    ) -> list[FreeSlot]:
        """Free slots on every day touched by [start, end), in chronological order.

        An *end* at exactly midnight does not pull in the following day.
        """
        limit = self.settings.free_slots_limit if limit is None else limit
        require_range(start, end)
        _require_limit(limit)

        last_day = (end - timedelta(microseconds=1)).date()
        horizon_days = (last_day - start.date()).days + 1
        slots = scan_free_slots(
            self.organizer_source,
            owner_id,
            start,
            duration_minutes,
            horizon_days,
            self.working_hours,
            max_horizon_days=self.settings.max_horizon_days,
        )
        proposed = take_chronological(slots, limit)
        for slot in proposed:
            slot.proximity_score = self.settings.default_proximity_score
        return proposed

    def propose_alternatives(
        self,
        owner_id: str,
        desired_start: datetime,
        end: datetime,
        duration_minutes: int,
        limit: int | None = None,
    ) -> list[FreeSlot]:
        """Free slots over the week following *desired_start*, closest first.

        *end* only has to describe a valid window with *desired_start*; the
        search horizon is fixed by ``alternatives_horizon_days``.
        """
        limit = self.settings.alternatives_limit if limit is None else limit
        require_range(desired_start, end)
        _require_limit(limit)

        logger.info(
            "Proposing alternatives for %s around %s", owner_id, desired_start
        )
        slots = scan_free_slots(
            self.organizer_source,
            owner_id,
            desired_start,
            duration_minutes,
            self.settings.alternatives_horizon_days,
            self.working_hours,
            max_horizon_days=self.settings.max_horizon_days,
        )
        ranked = rank_by_proximity(slots, desired_start, limit)
        for slot in ranked:
            slot.proximity_score = proximity_score(desired_start, slot.start)
        return ranked

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def agenda_summary(self, owner_id: str, week_start: datetime) -> AgendaSummary:
        """Counts and busy time of the owner's commitments over one week.

        ``busy_minutes`` covers the whole period; the occupancy rate only counts
        busy time inside each day's working window, against the total working
        time of the period.
        """
        if not self.organizer_source.resolve_owner(owner_id):
            raise OwnerNotFound(owner_id)

        period_end = week_start + timedelta(days=SUMMARY_DAYS)
        commitments = sorted(
            self.organizer_source.list_commitments(owner_id, week_start, period_end),
            key=lambda c: (c.start_time, c.id),
        )

        spans = []
        for c in commitments:
            clipped = clip(c.start_time, c.end_time, week_start, period_end)
            if clipped is not None:
                spans.append(clipped)
        busy_minutes = union_minutes(spans)

        working_spans = []
        capacity = 0
        # One extra day covers the tail of a period that starts mid-day.
        for day in rrule(DAILY, dtstart=week_start, count=SUMMARY_DAYS + 1):
            window = clip(*working_window(day, self.working_hours), week_start, period_end)
            if window is None:
                continue
            capacity += int((window[1] - window[0]).total_seconds() // 60)
            for start, end in spans:
                clipped = clip(start, end, *window)
                if clipped is not None:
                    working_spans.append(clipped)
        working_busy = union_minutes(working_spans)
        occupancy = round(100 * working_busy / capacity, 1) if capacity else 0.0

        logger.info(
            "Agenda summary for %s from %s: %d commitment(s), %d busy minute(s)",
            owner_id, week_start, len(commitments), busy_minutes,
        )
        return AgendaSummary(
            owner_id=owner_id,
            period_start=week_start,
            period_end=period_end,
            commitments=commitments,
            busy_minutes=busy_minutes,
            occupancy_rate=occupancy,
        )
