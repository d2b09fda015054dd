"""In-memory commitment repositories."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from agenda.domain.models import Commitment
from agenda.services.intervals import overlaps


class CommitmentRepository:
    """Dict-backed store of commitments, keyed by owner id then commitment id."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Commitment]] = {}

    def add_owner(self, owner_id: str) -> None:
        self._store.setdefault(owner_id, {})

    def add(self, commitment: Commitment) -> None:
        self._store.setdefault(commitment.owner_id, {})[commitment.id] = commitment

    def clear(self) -> None:
        self._store.clear()

    def resolve_owner(self, owner_id: str) -> bool:
        return owner_id in self._store

    def list_commitments(
        self, owner_id: str, range_start: datetime, range_end: datetime
    ) -> list[Commitment]:
        return [
            c
            for c in self._store.get(owner_id, {}).values()
            if overlaps(c.start_time, c.end_time, range_start, range_end)
        ]


# ---------------------------------------------------------------------------
# Seed data – a small agenda around today, useful for trying the routes
# ---------------------------------------------------------------------------

SAMPLE_ORGANIZER_ID = "organizer-1"
SAMPLE_PARTICIPANT_ID = "participant-1"


def _today() -> datetime:
    return datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def _seed_events(repo: CommitmentRepository) -> None:
    today = _today()
    for cid, title, day, start_h, end_h, location in (
        ("ev-1", "Product launch", 1, 10, 12, "Main hall"),
        ("ev-2", "Team workshop", 1, 14, 17, "Room 4"),
        ("ev-3", "Networking evening", 2, 18, 21, "Rooftop"),
        ("ev-4", "Conference day", 4, 8, 22, "Expo centre"),
    ):
        repo.add(
            Commitment(
                id=cid,
                title=title,
                start_time=today + timedelta(days=day, hours=start_h),
                end_time=today + timedelta(days=day, hours=end_h),
                location=location,
                owner_id=SAMPLE_ORGANIZER_ID,
            )
        )


def _seed_bookings(repo: CommitmentRepository) -> None:
    today = _today()
    repo.add(
        Commitment(
            id="bk-1",
            title="Product launch",
            start_time=today + timedelta(days=1, hours=10),
            end_time=today + timedelta(days=1, hours=12),
            location="Main hall",
            owner_id=SAMPLE_PARTICIPANT_ID,
        )
    )


def create_event_repository() -> CommitmentRepository:
    """Return a CommitmentRepository pre-loaded with an organizer's events."""
    repo = CommitmentRepository()
    _seed_events(repo)
    return repo


def create_booking_repository() -> CommitmentRepository:
    """Return a CommitmentRepository pre-loaded with a participant's bookings."""
    repo = CommitmentRepository()
    _seed_bookings(repo)
    return repo
