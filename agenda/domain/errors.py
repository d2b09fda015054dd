"""Errors raised by the agenda core.

Every error is a rejection of one call's inputs; the core holds no state that
a failure could leave behind.
"""

from __future__ import annotations


class AgendaError(Exception):
    """Base class for all agenda errors."""


class InvalidRange(AgendaError, ValueError):
    """A window whose end is not after its start."""


class InvalidDuration(AgendaError, ValueError):
    """A requested slot duration that is not positive."""


class InvalidHorizon(AgendaError, ValueError):
    """A search horizon that is not positive or exceeds the configured cap."""


class InvalidLimit(AgendaError, ValueError):
    """A result limit that is not positive."""


class OwnerNotFound(AgendaError, LookupError):
    """The commitment source does not know the owner identifier."""

    def __init__(self, owner_id: str) -> None:
        super().__init__(f"Owner not found: {owner_id}")
        self.owner_id = owner_id
