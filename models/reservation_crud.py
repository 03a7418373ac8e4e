"""
Reservation data access functions.
Handles insert, read and lifecycle updates for cabin reservations.

New bookings are only ever created through reservation_booking.create_reservation,
which wraps insert_reservation in its overlap-checking transaction.
"""

import logging
import sqlite3
from datetime import date, datetime, timedelta

from database import get_db
from utils.datetime_helpers import from_timestamp, to_timestamp
from .errors import InvalidTransition, NotFound, StorageFailure
from .reservation_overlap import ACTIVE_STATUSES, Interval

logger = logging.getLogger(__name__)

# Allowed lifecycle moves: reserved -> occupied, reserved/occupied -> cancelled
RESERVATION_TRANSITIONS = {
    'reserved': {'occupied', 'cancelled'},
    'occupied': {'cancelled'},
    'cancelled': set(),
}


# =============================================================================
# SERIALIZATION
# =============================================================================

def serialize_reservation(row) -> dict:
    """
    Convert a reservation row into an API dict.

    start/end are the canonical instants; date, start_time and end_time are
    derived from them for display.
    """
    reservation = dict(row)
    start = from_timestamp(reservation['start_at'])
    end = from_timestamp(reservation['end_at'])

    reservation['start'] = to_timestamp(start)
    reservation['end'] = to_timestamp(end)
    reservation['date'] = start.date().isoformat()
    reservation['start_time'] = start.strftime('%H:%M:%S')
    reservation['end_time'] = end.strftime('%H:%M:%S')
    reservation['duration_minutes'] = int((end - start).total_seconds() // 60)
    return reservation


def reservation_interval(reservation: dict) -> Interval:
    """Build the [start, end) interval of a reservation row/dict."""
    return Interval(from_timestamp(reservation['start_at']), from_timestamp(reservation['end_at']))


# =============================================================================
# CREATE
# =============================================================================

def insert_reservation(
    cursor,
    cabin_id: int,
    start: datetime,
    end: datetime,
    guest: str = '',
    party_size: int = None,
    notes: str = None,
    status: str = 'reserved'
) -> int:
    """
    Insert a reservation row inside the caller's transaction.

    Args:
        cursor: Cursor of an open BEGIN IMMEDIATE transaction
        cabin_id: Cabin ID
        start: Start instant
        end: End instant (strictly after start)
        guest: Guest label
        party_size: Optional party size
        notes: Optional notes
        status: Initial status

    Returns:
        New reservation ID
    """
    cursor.execute('''
        INSERT INTO cabin_reservations
        (cabin_id, start_at, end_at, guest, party_size, status, notes, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
    ''', (cabin_id, to_timestamp(start), to_timestamp(end), guest or '',
          party_size, status, notes))
    return cursor.lastrowid


# =============================================================================
# READ
# =============================================================================

def get_reservation_by_id(reservation_id: int) -> dict:
    """
    Get reservation by ID with its cabin name.

    Returns:
        Reservation dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        SELECT r.*, c.name as cabin_name, c.capacity as cabin_capacity
        FROM cabin_reservations r
        JOIN cabins c ON r.cabin_id = c.id
        WHERE r.id = ?
    ''', (reservation_id,))
    row = cursor.fetchone()
    return serialize_reservation(row) if row else None


def get_active_reservations_in_window(
    window_start: datetime,
    window_end: datetime,
    cabin_id: int = None,
    cursor=None
) -> list:
    """
    Get reserved/occupied reservations intersecting [window_start, window_end).

    Args:
        window_start: Window start instant
        window_end: Window end instant
        cabin_id: Restrict to one cabin (optional)
        cursor: Transaction cursor, so the booking check reads under its lock

    Returns:
        List of raw reservation dicts ordered by cabin and start
    """
    cur = cursor or get_db().cursor()
    placeholders = ','.join('?' * len(ACTIVE_STATUSES))

    query = f'''
        SELECT * FROM cabin_reservations
        WHERE status IN ({placeholders})
          AND start_at < ?
          AND end_at > ?
    '''
    params = [*ACTIVE_STATUSES, to_timestamp(window_end), to_timestamp(window_start)]

    if cabin_id is not None:
        query += ' AND cabin_id = ?'
        params.append(cabin_id)

    query += ' ORDER BY cabin_id, start_at'

    cur.execute(query, params)
    return [dict(row) for row in cur.fetchall()]


def get_reservations(
    reservation_date: date = None,
    cabin_id: int = None,
    include_cancelled: bool = False
) -> list:
    """
    List reservations, optionally filtered by calendar day and cabin.

    A reservation belongs to a day when its interval intersects that day.

    Args:
        reservation_date: Calendar day (optional)
        cabin_id: Cabin ID (optional)
        include_cancelled: Include cancelled reservations

    Returns:
        List of serialized reservation dicts ordered by start
    """
    db = get_db()
    cursor = db.cursor()

    query = '''
        SELECT r.*, c.name as cabin_name
        FROM cabin_reservations r
        JOIN cabins c ON r.cabin_id = c.id
        WHERE 1=1
    '''
    params = []

    if reservation_date is not None:
        day_start = datetime.combine(reservation_date, datetime.min.time())
        query += ' AND r.start_at < ? AND r.end_at > ?'
        params.extend([to_timestamp(day_start + timedelta(days=1)), to_timestamp(day_start)])

    if cabin_id is not None:
        query += ' AND r.cabin_id = ?'
        params.append(cabin_id)

    if not include_cancelled:
        placeholders = ','.join('?' * len(ACTIVE_STATUSES))
        query += f' AND r.status IN ({placeholders})'
        params.extend(ACTIVE_STATUSES)

    query += ' ORDER BY r.start_at, r.cabin_id'

    cursor.execute(query, params)
    return [serialize_reservation(row) for row in cursor.fetchall()]


# =============================================================================
# LIFECYCLE
# =============================================================================

def change_reservation_status(reservation_id: int, new_status: str) -> dict:
    """
    Move a reservation along its lifecycle.

    Args:
        reservation_id: Reservation ID
        new_status: 'occupied' or 'cancelled'

    Returns:
        Updated reservation dict

    Raises:
        NotFound: Reservation does not exist
        InvalidTransition: Move not allowed from the current status
        StorageFailure: Database error
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT status FROM cabin_reservations WHERE id = ?', (reservation_id,))
        row = cursor.fetchone()
        if not row:
            db.rollback()
            raise NotFound(f'Reservation {reservation_id} not found')

        old_status = row['status']
        if new_status not in RESERVATION_TRANSITIONS.get(old_status, set()):
            db.rollback()
            raise InvalidTransition(
                f'Cannot change reservation from {old_status} to {new_status}',
                current_status=old_status
            )

        cursor.execute('''
            UPDATE cabin_reservations
            SET status = ?, updated_at = CURRENT_TIMESTAMP
            WHERE id = ?
        ''', (new_status, reservation_id))

        db.commit()

    except sqlite3.Error as e:
        db.rollback()
        logger.error('Status change failed for reservation %s: %s', reservation_id, e)
        raise StorageFailure('Could not update reservation') from e

    logger.info('Reservation %s: %s -> %s', reservation_id, old_status, new_status)
    return get_reservation_by_id(reservation_id)


def mark_reservation_occupied(reservation_id: int) -> dict:
    """Guest has arrived: reserved -> occupied."""
    return change_reservation_status(reservation_id, 'occupied')


def cancel_reservation(reservation_id: int) -> dict:
    """Cancel a reservation, releasing its slot."""
    return change_reservation_status(reservation_id, 'cancelled')
