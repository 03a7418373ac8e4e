"""
Interval overlap predicates.

Pure functions, no database access. Intervals are half-open [start, end):
two reservations that merely touch (one ends exactly when the other starts)
do not overlap.
"""

from datetime import datetime
from typing import Iterable, List, NamedTuple


# =============================================================================
# CONSTANTS
# =============================================================================

# Reservation statuses that hold a slot; 'cancelled' never does
ACTIVE_STATUSES = ('reserved', 'occupied')

RESERVATION_STATUSES = ('reserved', 'occupied', 'cancelled')


class Interval(NamedTuple):
    start: datetime
    end: datetime


def is_active(status: str) -> bool:
    """Return True if a reservation with this status blocks its slot."""
    return status in ACTIVE_STATUSES


def intervals_overlap(a: Interval, b: Interval) -> bool:
    """
    Check whether two half-open intervals share at least one instant.

    Equivalent to NOT (a.end <= b.start OR a.start >= b.end).
    """
    return a.start < b.end and a.end > b.start


def find_overlaps(existing: Iterable[Interval], candidate: Interval) -> List[Interval]:
    """Return the members of ``existing`` that overlap ``candidate``."""
    return [interval for interval in existing if intervals_overlap(interval, candidate)]


def overlaps(existing: Iterable[Interval], candidate: Interval) -> bool:
    """
    Check a candidate slot against existing intervals.

    Args:
        existing: Intervals of the active reservations on one cabin
        candidate: The slot being booked

    Returns:
        True if any existing interval overlaps the candidate
    """
    return any(intervals_overlap(interval, candidate) for interval in existing)


def contains_instant(interval: Interval, instant: datetime) -> bool:
    """Check whether ``instant`` falls inside [start, end)."""
    return interval.start <= instant < interval.end
