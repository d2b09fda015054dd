"""Interval arithmetic over half-open [start, end) windows."""

from __future__ import annotations

from datetime import datetime

from agenda.domain.enums import OverlapKind
from agenda.domain.errors import InvalidRange
from agenda.domain.models import TimeWindow


def require_range(start: datetime, end: datetime) -> TimeWindow:
    """Build a TimeWindow, raising InvalidRange when end is not after start."""
    if end <= start:
        raise InvalidRange(f"end ({end.isoformat()}) must be after start ({start.isoformat()})")
    return TimeWindow(start=start, end=end)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open intersection test. Touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def classify_overlap(proposed: TimeWindow, existing: TimeWindow) -> OverlapKind | None:
    """Classify how *proposed* overlaps *existing*, or None if they don't.

    Precedence, first match wins:
      1. TOTAL          proposed encloses existing (equal spans included)
      2. ENGLOBE        existing encloses proposed
      3. PARTIEL_DEBUT  proposed starts inside existing and ends after it
      4. PARTIEL_FIN    proposed starts before existing and ends inside it
    """
    ps, pe = proposed.start, proposed.end
    cs, ce = existing.start, existing.end
    if not overlaps(ps, pe, cs, ce):
        return None
    if ps <= cs and pe >= ce:
        return OverlapKind.TOTAL
    if cs <= ps and pe <= ce:
        return OverlapKind.ENCLOSED
    if cs <= ps:
        return OverlapKind.PARTIAL_START
    return OverlapKind.PARTIAL_END


def clip(
    start: datetime, end: datetime, bound_start: datetime, bound_end: datetime
) -> tuple[datetime, datetime] | None:
    """Clip [start, end) to [bound_start, bound_end); None if nothing remains."""
    lo = max(start, bound_start)
    hi = min(end, bound_end)
    if hi <= lo:
        return None
    return lo, hi


def union_minutes(spans: list[tuple[datetime, datetime]]) -> int:
    """Total minutes covered by *spans*, counting overlapping parts once."""
    if not spans:
        return 0
    ordered = sorted(spans)
    total = 0.0
    cur_start, cur_end = ordered[0]
    for s, e in ordered[1:]:
        if s <= cur_end:
            cur_end = max(cur_end, e)
        else:
            total += (cur_end - cur_start).total_seconds()
            cur_start, cur_end = s, e
    total += (cur_end - cur_start).total_seconds()
    return int(total // 60)
