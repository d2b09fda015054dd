"""Service for detecting scheduling conflicts against an owner's commitments."""

from __future__ import annotations

import logging
from datetime import datetime

from agenda.domain.enums import CheckKind, OverlapKind
from agenda.domain.errors import OwnerNotFound
from agenda.domain.models import Commitment, ConflictDetail, ConflictReport, TimeWindow
from agenda.repos.source import CommitmentSource
from agenda.services.intervals import classify_overlap, overlaps, require_range

logger = logging.getLogger(__name__)

_DESCRIPTIONS = {
    OverlapKind.TOTAL: "Proposed window covers all of '{title}'",
    OverlapKind.ENCLOSED: "Proposed window falls entirely within '{title}'",
    OverlapKind.PARTIAL_START: "Proposed window starts during '{title}'",
    OverlapKind.PARTIAL_END: "Proposed window ends during '{title}'",
}


def find_conflicts(
    new_start: datetime,
    new_end: datetime,
    existing: list[Commitment],
) -> list[Commitment]:
    """Return existing commitments that overlap with the given time range.

    Overlap rule: conflict if new_start < existing.end_time AND existing.start_time < new_end.
    Exact boundary touches (end == start) are NOT considered conflicts.
    """
    return [c for c in existing if overlaps(new_start, new_end, c.start_time, c.end_time)]


def describe_conflict(proposed: TimeWindow, commitment: Commitment) -> ConflictDetail:
    """Build the ConflictDetail for a commitment already known to overlap."""
    kind = classify_overlap(
        proposed, TimeWindow(start=commitment.start_time, end=commitment.end_time)
    )
    if kind is None:
        raise ValueError(f"Commitment {commitment.id} does not overlap the proposed window")
    return ConflictDetail(
        commitment_id=commitment.id,
        title=commitment.title,
        location=commitment.location,
        start_time=commitment.start_time,
        end_time=commitment.end_time,
        kind=kind,
        description=_DESCRIPTIONS[kind].format(title=commitment.title),
    )


def detect_conflicts(
    source: CommitmentSource,
    owner_id: str,
    proposed_start: datetime,
    proposed_end: datetime,
    check_kind: CheckKind = CheckKind.ORGANIZER,
) -> ConflictReport:
    """Check a proposed window against the owner's commitments.

    Raises InvalidRange if proposed_end <= proposed_start and OwnerNotFound if
    the source does not know the owner. Conflicts are ordered by commitment
    start.
    """
    window = require_range(proposed_start, proposed_end)
    if not source.resolve_owner(owner_id):
        raise OwnerNotFound(owner_id)

    logger.info(
        "Checking %s conflicts for %s between %s and %s",
        check_kind, owner_id, proposed_start, proposed_end,
    )
    existing = source.list_commitments(owner_id, window.start, window.end)
    overlapping = sorted(
        find_conflicts(window.start, window.end, existing),
        key=lambda c: (c.start_time, c.end_time, c.id),
    )
    details = [describe_conflict(window, c) for c in overlapping]

    for detail in details:
        logger.warning(
            "Conflict (%s) with '%s' from %s to %s",
            detail.kind, detail.title, detail.start_time, detail.end_time,
        )

    return ConflictReport(window=window, check_kind=check_kind, conflicts=details)
