"""Domain models for the agenda conflict and free-slot service."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from agenda.domain.enums import CheckKind, OverlapKind, TimeBracket
from agenda.services import scoring


_WEEKDAY_NAMES = (
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class Commitment(BaseModel):
    """An existing calendar commitment, owned by the event-management side."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    location: str | None = None
    owner_id: str

    @model_validator(mode="after")
    def _end_after_start(self) -> Commitment:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class TimeWindow(BaseModel):
    """Immutable half-open window [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _end_after_start(self) -> TimeWindow:
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self


# ---------------------------------------------------------------------------
# Conflict reports
# ---------------------------------------------------------------------------


class ConflictDetail(BaseModel):
    commitment_id: str
    title: str
    location: str | None = None
    start_time: datetime
    end_time: datetime
    kind: OverlapKind
    description: str | None = None


class ConflictReport(BaseModel):
    """Result of checking one proposed window against an owner's commitments.

    ``conflict_detected`` and ``count`` are derived from ``conflicts``.
    """

    window: TimeWindow
    check_kind: CheckKind
    conflicts: list[ConflictDetail] = Field(default_factory=list)
    verified_at: datetime = Field(default_factory=_utcnow)

    @computed_field
    @property
    def conflict_detected(self) -> bool:
        return bool(self.conflicts)

    @computed_field
    @property
    def count(self) -> int:
        return len(self.conflicts)

    @computed_field
    @property
    def message(self) -> str:
        if not self.conflicts:
            return "No conflict detected"
        return f"{self.count} conflicting commitment(s) detected"


# ---------------------------------------------------------------------------
# Free slots
# ---------------------------------------------------------------------------


class FreeSlot(BaseModel):
    """A candidate free window.

    Only ``start``, ``end`` and ``proximity_score`` are stored; every other
    attribute is computed from them on read.
    """

    model_config = ConfigDict(validate_assignment=True)

    start: datetime
    end: datetime
    proximity_score: int = Field(default=0, ge=0, le=100)
    description: str | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> FreeSlot:
        if self.end <= self.start:
            raise ValueError("end must be after start")
        return self

    @computed_field
    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    @computed_field
    @property
    def weekday(self) -> str:
        return _WEEKDAY_NAMES[self.start.weekday()]

    @computed_field
    @property
    def time_bracket(self) -> TimeBracket:
        return scoring.time_bracket(self.start.hour)

    @computed_field
    @property
    def quality_score(self) -> int:
        return scoring.quality_score(
            self.start.weekday(),
            self.time_bracket,
            self.duration_minutes,
            self.proximity_score,
        )

    @computed_field
    @property
    def recommended(self) -> bool:
        return scoring.is_recommended(self.proximity_score)


# ---------------------------------------------------------------------------
# Agenda summary
# ---------------------------------------------------------------------------


class AgendaSummary(BaseModel):
    owner_id: str
    period_start: datetime
    period_end: datetime
    commitments: list[Commitment] = Field(default_factory=list)
    busy_minutes: int = 0
    occupancy_rate: float = 0.0

    @computed_field
    @property
    def commitment_count(self) -> int:
        return len(self.commitments)

    @computed_field
    @property
    def busy_hours(self) -> float:
        return round(self.busy_minutes / 60, 2)
