"""
Booking service: the only writer of new reservations.

Validates a request in a fixed order (each failure its own error kind), then
checks for overlaps and inserts inside a single BEGIN IMMEDIATE transaction.
SQLite grants one RESERVED lock at a time, so two concurrent bookings for the
same slot serialize and the second one sees the first one's row.
"""

import logging
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Optional

from flask import current_app

from database import get_db
from utils.validators import parse_date, parse_time, sanitize_input, validate_positive_integer
from .cabin import get_cabin_by_id
from .errors import (
    CapacityExceeded, InvalidDate, InvalidInput, InvalidTime,
    ResourceNotFound, SlotConflict, StorageFailure
)
from .reservation_crud import get_active_reservations_in_window, insert_reservation, reservation_interval
from .reservation_overlap import Interval, find_overlaps

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 90
MIN_DURATION_MINUTES = 1
# One week; also keeps start + duration inside datetime's range
MAX_DURATION_MINUTES = 7 * 24 * 60


@dataclass(frozen=True)
class BookingRequest:
    """Typed view of a loosely-shaped booking payload (JSON or form)."""

    cabin_id: Any
    date: Optional[str]
    start_time: Optional[str]
    guest: Optional[str] = None
    duration_minutes: Optional[Any] = None
    party_size: Optional[Any] = None
    notes: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "BookingRequest":
        """
        Build a request from request data.

        Accepts ``table_id`` as an alias of ``cabin_id`` and ``duration`` as an
        alias of ``duration_minutes``. Values are passed through untouched;
        create_reservation validates them in order.
        """
        payload = payload or {}
        cabin_id = payload.get('cabin_id')
        if cabin_id is None:
            cabin_id = payload.get('table_id')

        duration = payload.get('duration_minutes')
        if duration is None:
            duration = payload.get('duration')

        return cls(
            cabin_id=cabin_id,
            date=payload.get('date'),
            start_time=payload.get('start_time'),
            guest=payload.get('guest'),
            duration_minutes=duration,
            party_size=payload.get('party_size'),
            notes=payload.get('notes'),
        )


# =============================================================================
# VALIDATION STEPS
# =============================================================================

def _resolve_duration(duration_minutes) -> int:
    if duration_minutes is None or duration_minutes == '':
        return current_app.config.get('BOOKING_DEFAULT_DURATION_MINUTES', DEFAULT_DURATION_MINUTES)

    if isinstance(duration_minutes, bool):
        raise InvalidInput('duration must be a number of minutes')
    try:
        minutes = int(float(duration_minutes))
    except (TypeError, ValueError, OverflowError):
        raise InvalidInput('duration must be a number of minutes')

    if minutes > MAX_DURATION_MINUTES:
        raise InvalidInput(f'duration must be at most {MAX_DURATION_MINUTES} minutes')

    return max(MIN_DURATION_MINUTES, minutes)


def _resolve_party_size(party_size, cabin: dict) -> Optional[int]:
    # 0 and empty mean "not given"
    if party_size is None or party_size == '' or party_size == 0 or party_size == '0':
        return None

    valid, party_size, err = validate_positive_integer(party_size, 'party_size')
    if not valid:
        raise InvalidInput(err)

    if current_app.config.get('ENFORCE_PARTY_SIZE_CAPACITY') and party_size > cabin['capacity']:
        raise CapacityExceeded(
            f"Party of {party_size} exceeds {cabin['name']} capacity of {cabin['capacity']}",
            capacity=cabin['capacity']
        )

    return party_size


# =============================================================================
# CREATE
# =============================================================================

def create_reservation(
    cabin_id,
    date,
    start_time,
    guest: str = None,
    duration_minutes=None,
    party_size=None,
    notes: str = None
) -> int:
    """
    Book a cabin for [start, start + duration).

    Args:
        cabin_id: Cabin ID (positive integer)
        date: Calendar day, YYYY-MM-DD
        start_time: HH:MM (24h); HH:MM:SS and "H:MM AM/PM" also accepted
        guest: Guest label (optional)
        duration_minutes: Length in minutes, default 90, clamped to >= 1,
            at most MAX_DURATION_MINUTES
        party_size: Number of guests (optional)
        notes: Free text (optional)

    Returns:
        New reservation ID

    Raises:
        ResourceNotFound: Cabin id invalid or unknown
        InvalidDate: Date does not parse
        InvalidTime: Start time does not parse
        InvalidInput: Bad duration or party size
        CapacityExceeded: party_size > capacity (only when enforced)
        SlotConflict: Overlaps an active reservation on the cabin
        StorageFailure: Transaction could not complete
    """
    # 1. Cabin
    valid, cabin_id, err = validate_positive_integer(cabin_id, 'cabin_id')
    if not valid:
        raise ResourceNotFound(f'Invalid cabin: {err}')

    cabin = get_cabin_by_id(cabin_id)
    if not cabin or not cabin['active']:
        raise ResourceNotFound(f'Cabin {cabin_id} not found', cabin_id=cabin_id)

    # 2. Date
    booking_date = parse_date(date)
    if booking_date is None:
        raise InvalidDate('Invalid date format. Use YYYY-MM-DD')

    # 3. Start time
    booking_time = parse_time(start_time)
    if booking_time is None:
        raise InvalidTime('Invalid start_time format. Use HH:MM (24-hour)')

    # 4. Duration, party size
    duration = _resolve_duration(duration_minutes)
    party_size = _resolve_party_size(party_size, cabin)

    # 5. Interval
    start = datetime.combine(booking_date, booking_time).replace(second=0, microsecond=0)
    try:
        end = start + timedelta(minutes=duration)
    except OverflowError:
        raise InvalidInput('Reservation would end past the supported date range')
    candidate = Interval(start, end)

    guest = sanitize_input(guest, max_length=120)
    notes = sanitize_input(notes, max_length=500) or None

    # 6-7. Overlap check and insert as one unit
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        # Cabin may have been deactivated since the lookup above
        cursor.execute('SELECT active FROM cabins WHERE id = ?', (cabin_id,))
        row = cursor.fetchone()
        if not row or not row['active']:
            db.rollback()
            raise ResourceNotFound(f'Cabin {cabin_id} not found', cabin_id=cabin_id)

        existing = get_active_reservations_in_window(start, end, cabin_id=cabin_id, cursor=cursor)
        conflicts = find_overlaps([reservation_interval(r) for r in existing], candidate)
        if conflicts:
            db.rollback()
            logger.warning(
                'Slot conflict on cabin %s for %s - %s (%d overlapping)',
                cabin_id, start, end, len(conflicts)
            )
            raise SlotConflict(
                'Cabin is already reserved for that time slot',
                conflicting_reservation_ids=[r['id'] for r in existing]
            )

        reservation_id = insert_reservation(
            cursor, cabin_id, start, end,
            guest=guest, party_size=party_size, notes=notes
        )

        db.commit()

    except sqlite3.IntegrityError as e:
        db.rollback()
        if 'slot_conflict' in str(e):
            logger.warning('Overlap trigger rejected booking on cabin %s for %s - %s', cabin_id, start, end)
            raise SlotConflict('Cabin is already reserved for that time slot') from e
        logger.error('Integrity error booking cabin %s: %s', cabin_id, e)
        raise StorageFailure('Could not save reservation') from e

    except sqlite3.Error as e:
        db.rollback()
        logger.error('Storage failure booking cabin %s: %s', cabin_id, e)
        raise StorageFailure('Could not save reservation') from e

    logger.info(
        'Reservation %s created: cabin %s, %s - %s, guest=%r',
        reservation_id, cabin_id, start, end, guest
    )
    return reservation_id


def create_reservation_from_request(request: BookingRequest) -> int:
    """Run create_reservation with the fields of a BookingRequest."""
    return create_reservation(
        request.cabin_id,
        request.date,
        request.start_time,
        guest=request.guest,
        duration_minutes=request.duration_minutes,
        party_size=request.party_size,
        notes=request.notes,
    )
