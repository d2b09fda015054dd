"""FastAPI application — entry point for the agenda service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from agenda.config import settings
from agenda.domain.errors import AgendaError, OwnerNotFound
from agenda.domain.models import AgendaSummary, ConflictReport, FreeSlot
from agenda.repos.memory import (
    CommitmentRepository,
    create_booking_repository,
    create_event_repository,
)
from agenda.services.agenda import AgendaService

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Agenda Service")

# ── Singletons (created at import time for simplicity) ────────────────
# The in-memory repositories stand in for the event and reservation stores;
# any CommitmentSource can be handed to AgendaService instead.
if settings.seed_sample_data:
    event_repo = create_event_repository()
    booking_repo = create_booking_repository()
else:
    event_repo = CommitmentRepository()
    booking_repo = CommitmentRepository()

agenda_service = AgendaService(
    organizer_source=event_repo,
    participant_source=booking_repo,
    settings=settings,
)


# ── Error handling ────────────────────────────────────────────────────


@app.exception_handler(AgendaError)
async def agenda_error_handler(request: Request, exc: AgendaError) -> JSONResponse:
    status_code = 404 if isinstance(exc, OwnerNotFound) else 400
    logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


# ── Routes ────────────────────────────────────────────────────────────


@app.get("/agenda/conflicts/{organizer_id}", response_model=ConflictReport)
def check_conflicts(organizer_id: str, start: datetime, end: datetime) -> ConflictReport:
    """Check a proposed window against an organizer's events."""
    return agenda_service.check_organizer_conflicts(organizer_id, start, end)


@app.get("/agenda/conflicts/bookings/{user_id}", response_model=ConflictReport)
def check_booking_conflicts(user_id: str, start: datetime, end: datetime) -> ConflictReport:
    """Check a proposed window against a participant's confirmed bookings."""
    return agenda_service.check_participant_conflicts(user_id, start, end)


@app.get("/agenda/free-slots/{organizer_id}", response_model=list[FreeSlot])
def propose_free_slots(
    organizer_id: str,
    start: datetime,
    end: datetime,
    duration_minutes: int,
    limit: int = Query(default=settings.free_slots_limit, gt=0),
) -> list[FreeSlot]:
    """Return free slots between *start* and *end*, in chronological order."""
    return agenda_service.propose_free_slots(
        organizer_id, start, end, duration_minutes, limit
    )


@app.get("/agenda/alternatives/{organizer_id}", response_model=list[FreeSlot])
def propose_alternatives(
    organizer_id: str,
    desired_start: datetime,
    end: datetime,
    duration_minutes: int,
    limit: int = Query(default=settings.alternatives_limit, gt=0),
) -> list[FreeSlot]:
    """Return the free slots closest to *desired_start* over the next week."""
    return agenda_service.propose_alternatives(
        organizer_id, desired_start, end, duration_minutes, limit
    )


@app.get("/agenda/summary/{organizer_id}", response_model=AgendaSummary)
def agenda_summary(organizer_id: str, week_start: datetime) -> AgendaSummary:
    """Return counts and busy time for the week starting at *week_start*."""
    return agenda_service.agenda_summary(organizer_id, week_start)


@app.get("/agenda/health")
def health() -> dict:
    return {
        "status": "ok",
        "service": "agenda",
        "time": datetime.now(timezone.utc).isoformat(),
    }
