"""Read interface the agenda core needs from the surrounding system."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from agenda.domain.models import Commitment


class CommitmentSource(Protocol):
    """Read-only access to an owner's commitments.

    The same protocol serves organizers (their own events) and participants
    (their confirmed bookings).
    """

    def resolve_owner(self, owner_id: str) -> bool:
        """Return True when *owner_id* is known."""
        ...

    def list_commitments(
        self, owner_id: str, range_start: datetime, range_end: datetime
    ) -> list[Commitment]:
        """Return the owner's commitments intersecting [range_start, range_end).

        No ordering is guaranteed.
        """
        ...
