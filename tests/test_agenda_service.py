"""Tests for the AgendaService façade."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

import pytest

from agenda.config import Settings
from agenda.domain.enums import CheckKind, OverlapKind
from agenda.domain.errors import (
    InvalidDuration,
    InvalidLimit,
    InvalidRange,
    OwnerNotFound,
)
from agenda.domain.models import Commitment
from agenda.repos.memory import (
    SAMPLE_ORGANIZER_ID,
    SAMPLE_PARTICIPANT_ID,
    CommitmentRepository,
    create_booking_repository,
    create_event_repository,
)
from agenda.services.agenda import AgendaService

ORGANIZER = "org-1"
PARTICIPANT = "user-1"
MONDAY = datetime(2025, 3, 10)


def _commitment(owner_id: str, start: datetime, end: datetime, title: str = "Busy") -> Commitment:
    return Commitment(
        id=f"{owner_id}-{title}-{start.isoformat()}",
        title=title,
        start_time=start,
        end_time=end,
        location="Hall",
        owner_id=owner_id,
    )


@pytest.fixture()
def env():
    """Fresh repos + service for each test."""
    event_repo = CommitmentRepository()
    booking_repo = CommitmentRepository()
    event_repo.add_owner(ORGANIZER)
    booking_repo.add_owner(PARTICIPANT)
    service = AgendaService(
        organizer_source=event_repo,
        participant_source=booking_repo,
        settings=Settings(),
    )

    class Env:
        pass

    e = Env()
    e.event_repo = event_repo
    e.booking_repo = booking_repo
    e.service = service
    return e


# ---------------------------------------------------------------------------
# Conflict checks
# ---------------------------------------------------------------------------


def test_organizer_conflicts(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12), "Talk")
    )

    report = env.service.check_organizer_conflicts(
        ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12)
    )

    assert report.conflict_detected is True
    assert report.check_kind == CheckKind.ORGANIZER
    assert report.conflicts[0].kind == OverlapKind.TOTAL


def test_organizer_conflicts_unknown_owner(env):
    with pytest.raises(OwnerNotFound):
        env.service.check_organizer_conflicts(
            "ghost", MONDAY.replace(hour=10), MONDAY.replace(hour=11)
        )


def test_participant_conflicts_use_bookings(env):
    env.booking_repo.add(
        _commitment(PARTICIPANT, MONDAY.replace(hour=18), MONDAY.replace(hour=20), "Concert")
    )

    report = env.service.check_participant_conflicts(
        PARTICIPANT, MONDAY.replace(hour=19), MONDAY.replace(hour=21)
    )

    assert report.check_kind == CheckKind.PARTICIPANT
    assert [c.kind for c in report.conflicts] == [OverlapKind.PARTIAL_START]


def test_participant_is_not_an_organizer(env):
    with pytest.raises(OwnerNotFound):
        env.service.check_organizer_conflicts(
            PARTICIPANT, MONDAY.replace(hour=10), MONDAY.replace(hour=11)
        )


def test_is_period_free(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12))
    )
    assert env.service.is_period_free(ORGANIZER, MONDAY.replace(hour=12), MONDAY.replace(hour=13))
    assert not env.service.is_period_free(
        ORGANIZER, MONDAY.replace(hour=11), MONDAY.replace(hour=13)
    )


# ---------------------------------------------------------------------------
# Free slots
# ---------------------------------------------------------------------------


def test_propose_free_slots_spans_every_touched_day(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12))
    )

    slots = env.service.propose_free_slots(
        ORGANIZER, MONDAY, MONDAY.replace(day=12, hour=9), duration_minutes=60
    )

    assert [(s.start, s.end) for s in slots] == [
        (MONDAY.replace(hour=8), MONDAY.replace(hour=9)),
        (MONDAY.replace(hour=12), MONDAY.replace(hour=13)),
        (MONDAY.replace(day=11, hour=8), MONDAY.replace(day=11, hour=9)),
        (MONDAY.replace(day=12, hour=8), MONDAY.replace(day=12, hour=9)),
    ]
    assert all(s.proximity_score == 50 for s in slots)
    assert not any(s.recommended for s in slots)


def test_propose_free_slots_end_at_midnight_excludes_that_day(env):
    slots = env.service.propose_free_slots(
        ORGANIZER, MONDAY, MONDAY.replace(day=12), duration_minutes=60
    )

    assert [s.start for s in slots] == [
        MONDAY.replace(hour=8),
        MONDAY.replace(day=11, hour=8),
    ]


def test_propose_free_slots_limit(env):
    slots = env.service.propose_free_slots(
        ORGANIZER, MONDAY, MONDAY + timedelta(days=30), duration_minutes=60, limit=2
    )
    assert [s.start for s in slots] == [
        MONDAY.replace(hour=8),
        MONDAY.replace(day=11, hour=8),
    ]


def test_propose_free_slots_default_limit(env):
    slots = env.service.propose_free_slots(
        ORGANIZER, MONDAY, MONDAY + timedelta(days=30), duration_minutes=60
    )
    assert len(slots) == 10


def test_propose_free_slots_validation(env):
    with pytest.raises(InvalidRange):
        env.service.propose_free_slots(ORGANIZER, MONDAY, MONDAY, 60)
    with pytest.raises(InvalidDuration):
        env.service.propose_free_slots(ORGANIZER, MONDAY, MONDAY + timedelta(days=1), 0)
    with pytest.raises(InvalidLimit):
        env.service.propose_free_slots(ORGANIZER, MONDAY, MONDAY + timedelta(days=1), 60, 0)
    with pytest.raises(OwnerNotFound):
        env.service.propose_free_slots("ghost", MONDAY, MONDAY + timedelta(days=1), 60)


def test_propose_alternatives_ranked_by_proximity(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12))
    )
    desired = MONDAY.replace(hour=10)

    slots = env.service.propose_alternatives(
        ORGANIZER, desired, MONDAY.replace(hour=11), duration_minutes=60
    )

    assert [s.start for s in slots] == [
        MONDAY.replace(hour=8),
        MONDAY.replace(hour=12),
        MONDAY.replace(day=11, hour=8),
        MONDAY.replace(day=12, hour=8),
        MONDAY.replace(day=13, hour=8),
    ]
    assert [s.proximity_score for s in slots] == [80, 80, 80, 60, 40]
    assert [s.recommended for s in slots] == [True, True, True, False, False]


def test_propose_alternatives_limit(env):
    slots = env.service.propose_alternatives(
        ORGANIZER, MONDAY.replace(hour=9), MONDAY.replace(hour=10), 60, limit=1
    )
    assert [s.start for s in slots] == [MONDAY.replace(hour=8)]


def test_propose_alternatives_searches_one_week(env):
    slots = env.service.propose_alternatives(
        ORGANIZER, MONDAY.replace(hour=9), MONDAY.replace(hour=10), 60, limit=50
    )
    assert len(slots) == 7
    assert max(s.start for s in slots) == MONDAY.replace(day=16, hour=8)


def test_propose_alternatives_invalid_range(env):
    with pytest.raises(InvalidRange):
        env.service.propose_alternatives(
            ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=9), 60
        )


def test_custom_working_hours_from_settings():
    repo = CommitmentRepository()
    repo.add_owner(ORGANIZER)
    service = AgendaService(
        repo, settings=Settings(working_day_start=time(9, 0), working_day_end=time(18, 0))
    )

    slots = service.propose_free_slots(ORGANIZER, MONDAY, MONDAY.replace(hour=23), 60)

    assert [(s.start, s.end) for s in slots] == [
        (MONDAY.replace(hour=9), MONDAY.replace(hour=10)),
    ]


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("AGENDA_MAX_HORIZON_DAYS", "30")
    monkeypatch.setenv("AGENDA_WORKING_DAY_START", "09:30")
    settings = Settings()
    assert settings.max_horizon_days == 30
    assert settings.working_day_start == time(9, 30)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------


def test_agenda_summary(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=10), MONDAY.replace(hour=12), "A")
    )
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(day=11, hour=9), MONDAY.replace(day=11, hour=10), "B")
    )
    env.event_repo.add(
        _commitment(
            ORGANIZER,
            MONDAY.replace(day=11, hour=9, minute=30),
            MONDAY.replace(day=11, hour=10, minute=30),
            "C",
        )
    )
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(day=17, hour=10), MONDAY.replace(day=17, hour=11), "Next week")
    )

    summary = env.service.agenda_summary(ORGANIZER, MONDAY)

    assert summary.period_end == MONDAY + timedelta(days=7)
    assert summary.commitment_count == 3
    assert [c.title for c in summary.commitments] == ["A", "B", "C"]
    assert summary.busy_minutes == 210
    assert summary.busy_hours == 3.5
    assert summary.occupancy_rate == 3.6


def test_agenda_summary_empty_week(env):
    summary = env.service.agenda_summary(ORGANIZER, MONDAY)
    assert summary.commitment_count == 0
    assert summary.busy_minutes == 0
    assert summary.occupancy_rate == 0.0


def test_agenda_summary_unknown_owner(env):
    with pytest.raises(OwnerNotFound):
        env.service.agenda_summary("ghost", MONDAY)


def test_agenda_summary_off_hours_commitment_has_no_occupancy(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=22), MONDAY.replace(day=11, hour=8), "Night")
    )

    summary = env.service.agenda_summary(ORGANIZER, MONDAY)

    assert summary.busy_minutes == 600
    assert summary.occupancy_rate == 0.0


def test_agenda_summary_occupancy_counts_working_hours_only(env):
    env.event_repo.add(
        _commitment(ORGANIZER, MONDAY.replace(hour=6), MONDAY.replace(hour=10), "Early")
    )

    summary = env.service.agenda_summary(ORGANIZER, MONDAY)

    assert summary.busy_minutes == 240
    # 120 working minutes out of 7 x 840
    assert summary.occupancy_rate == 2.0


def test_agenda_summary_week_starting_mid_day(env):
    env.event_repo.add(
        _commitment(
            ORGANIZER, MONDAY.replace(day=17, hour=8), MONDAY.replace(day=17, hour=10), "Tail"
        )
    )

    summary = env.service.agenda_summary(ORGANIZER, MONDAY.replace(hour=12))

    # capacity: Monday 12-22 + 6 full days + next Monday 8-12 = 7 x 840
    assert summary.commitment_count == 1
    assert summary.busy_minutes == 120
    assert summary.occupancy_rate == 2.0


# ---------------------------------------------------------------------------
# Sample repositories
# ---------------------------------------------------------------------------


def test_sample_repositories_back_the_service():
    service = AgendaService(
        organizer_source=create_event_repository(),
        participant_source=create_booking_repository(),
        settings=Settings(),
    )
    tomorrow = datetime.now(timezone.utc).replace(
        hour=0, minute=0, second=0, microsecond=0
    ) + timedelta(days=1)

    organizer_report = service.check_organizer_conflicts(
        SAMPLE_ORGANIZER_ID, tomorrow.replace(hour=11), tomorrow.replace(hour=15)
    )
    participant_report = service.check_participant_conflicts(
        SAMPLE_PARTICIPANT_ID, tomorrow.replace(hour=9), tomorrow.replace(hour=11)
    )

    assert [c.commitment_id for c in organizer_report.conflicts] == ["ev-1", "ev-2"]
    assert [c.commitment_id for c in participant_report.conflicts] == ["bk-1"]
