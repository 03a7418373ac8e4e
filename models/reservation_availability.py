"""
Availability queries.
Joins cabins with the reservations active on a day or at an instant so the
UI can render per-slot occupancy.

All functions are read-only. ``status`` in the results is derived from the
reservation calendar only; the cabin's manual status is reported separately
as ``manual_status`` and never overrides it.
"""

from datetime import datetime, timedelta

from utils.datetime_helpers import get_now, to_timestamp
from utils.validators import parse_date, parse_time
from .cabin import get_all_cabins
from .errors import InvalidDate, InvalidInput, InvalidTime
from .reservation_booking import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES
from .reservation_countdown import describe_countdown
from .reservation_crud import (
    get_active_reservations_in_window, reservation_interval, serialize_reservation
)
from .reservation_overlap import Interval, contains_instant, overlaps


def _require_date(value):
    parsed = parse_date(value)
    if parsed is None:
        raise InvalidDate('Invalid date format. Use YYYY-MM-DD')
    return parsed


def _require_time(value):
    parsed = parse_time(value)
    if parsed is None:
        raise InvalidTime('Invalid time format. Use HH:MM (24-hour)')
    return parsed


def _group_by_cabin(reservations: list) -> dict:
    grouped = {}
    for reservation in reservations:
        grouped.setdefault(reservation['cabin_id'], []).append(reservation)
    return grouped


def _cabin_entry(cabin: dict) -> dict:
    return {
        'cabin_id': cabin['id'],
        'name': cabin['name'],
        'capacity': cabin['capacity'],
        # Grid clients built for tables read 'seats'
        'seats': cabin['capacity'],
        'manual_status': cabin['status'],
    }


# =============================================================================
# BY DATE
# =============================================================================

def get_status_by_date(reservation_date, now: datetime = None) -> list:
    """
    Status of every active cabin for a whole calendar day.

    A cabin is 'available' unless an active reservation intersects the day;
    then the earliest such reservation's status, guest and window are
    surfaced, and every active window of the day is listed.

    Args:
        reservation_date: Day (YYYY-MM-DD string or date)
        now: Instant for countdown labels (default: configured wall clock)

    Returns:
        List of dicts, one per cabin ordered by id:
        {cabin_id, name, capacity, seats, manual_status, status, guest,
         reservation_id, start, end, start_time, end_time, countdown,
         reservations: [{id, status, guest, start, end, start_time, end_time}]}
    """
    day = _require_date(reservation_date)
    day_start = datetime.combine(day, datetime.min.time())
    day_end = day_start + timedelta(days=1)
    now = now or get_now()

    by_cabin = _group_by_cabin(get_active_reservations_in_window(day_start, day_end))

    results = []
    for cabin in get_all_cabins():
        entry = _cabin_entry(cabin)
        day_reservations = [serialize_reservation(r) for r in by_cabin.get(cabin['id'], [])]

        if day_reservations:
            first = day_reservations[0]
            interval = reservation_interval(first)
            entry.update({
                'status': first['status'],
                'guest': first['guest'],
                'reservation_id': first['id'],
                'start': first['start'],
                'end': first['end'],
                'start_time': first['start_time'],
                'end_time': first['end_time'],
                'countdown': describe_countdown(interval.start, interval.end, now),
            })
        else:
            entry.update({
                'status': 'available',
                'guest': None,
                'reservation_id': None,
                'start': None,
                'end': None,
                'start_time': None,
                'end_time': None,
                'countdown': None,
            })

        entry['reservations'] = [{
            'id': r['id'],
            'status': r['status'],
            'guest': r['guest'],
            'party_size': r['party_size'],
            'start': r['start'],
            'end': r['end'],
            'start_time': r['start_time'],
            'end_time': r['end_time'],
        } for r in day_reservations]

        results.append(entry)

    return results


# =============================================================================
# AT AN INSTANT
# =============================================================================

def get_status_at(instant: datetime) -> list:
    """
    Status of every active cabin as of one instant.

    Pure with respect to time: the caller supplies the instant, so a UI can
    re-issue the query at whatever cadence it refreshes.

    Returns:
        List of {cabin_id, name, capacity, seats, manual_status, status,
        reservation_id, guest, start, end}
    """
    instant = instant.replace(microsecond=0)
    window_end = instant + timedelta(seconds=1)
    by_cabin = _group_by_cabin(get_active_reservations_in_window(instant, window_end))

    results = []
    for cabin in get_all_cabins():
        entry = _cabin_entry(cabin)
        current = next(
            (r for r in by_cabin.get(cabin['id'], [])
             if contains_instant(reservation_interval(r), instant)),
            None
        )

        if current:
            current = serialize_reservation(current)
            entry.update({
                'status': current['status'],
                'reservation_id': current['id'],
                'guest': current['guest'],
                'start': current['start'],
                'end': current['end'],
            })
        else:
            entry.update({
                'status': 'available',
                'reservation_id': None,
                'guest': None,
                'start': None,
                'end': None,
            })

        results.append(entry)

    return results


def get_availability_at(reservation_date, time_str) -> list:
    """
    Status of every cabin at ``date@time``.

    Args:
        reservation_date: Day (YYYY-MM-DD string or date)
        time_str: Time (HH:MM, HH:MM:SS or H:MM AM/PM)
    """
    day = _require_date(reservation_date)
    at = _require_time(time_str)
    return get_status_at(datetime.combine(day, at))


def get_availability_now() -> list:
    """Status of every cabin at the configured wall-clock "now"."""
    return get_status_at(get_now())


# =============================================================================
# FREE CABINS FOR A SLOT
# =============================================================================

def get_available_cabins(
    reservation_date,
    time_str,
    duration_minutes: int = 90,
    party_size: int = None
) -> list:
    """
    Cabins with no active reservation anywhere in [start, start + duration).

    Args:
        reservation_date: Day (YYYY-MM-DD)
        time_str: Start time
        duration_minutes: Slot length in minutes (clamped to >= 1, at most a week)
        party_size: Only cabins seating at least this many (optional)

    Returns:
        List of cabin dicts (id, name, capacity, status) free for the slot
    """
    day = _require_date(reservation_date)
    at = _require_time(time_str)

    try:
        duration_minutes = max(MIN_DURATION_MINUTES, int(duration_minutes))
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput('duration must be a number of minutes')
    if duration_minutes > MAX_DURATION_MINUTES:
        raise InvalidInput(f'duration must be at most {MAX_DURATION_MINUTES} minutes')

    start = datetime.combine(day, at)
    try:
        candidate = Interval(start, start + timedelta(minutes=duration_minutes))
    except OverflowError:
        raise InvalidInput('Slot would end past the supported date range')
    by_cabin = _group_by_cabin(get_active_reservations_in_window(candidate.start, candidate.end))

    free = []
    for cabin in get_all_cabins(min_capacity=party_size):
        existing = [reservation_interval(r) for r in by_cabin.get(cabin['id'], [])]
        if not overlaps(existing, candidate):
            free.append({
                'id': cabin['id'],
                'name': cabin['name'],
                'capacity': cabin['capacity'],
                'status': cabin['status'],
                'start': to_timestamp(candidate.start),
                'end': to_timestamp(candidate.end),
            })

    return free
