"""
Cabin data access functions.
Handles the bookable cabins: listing, lookup, manual status writes and
administrative CRUD.
"""

import logging
import sqlite3

from database import get_db
from .errors import CabinInUse, InvalidInput, StorageFailure
from .reservation_overlap import ACTIVE_STATUSES

logger = logging.getLogger(__name__)

# Manual display statuses a cabin can be set to
CABIN_STATUSES = ('available', 'reserved', 'occupied')


# =============================================================================
# READ
# =============================================================================

def get_all_cabins(active_only: bool = True, min_capacity: int = None) -> list:
    """
    Get all cabins.

    Args:
        active_only: If True, only return active cabins
        min_capacity: Only cabins seating at least this many guests (optional)

    Returns:
        List of cabin dicts ordered by id
    """
    db = get_db()
    cursor = db.cursor()

    query = 'SELECT * FROM cabins WHERE 1=1'
    params = []

    if active_only:
        query += ' AND active = 1'

    if min_capacity:
        query += ' AND capacity >= ?'
        params.append(min_capacity)

    query += ' ORDER BY id'

    cursor.execute(query, params)
    return [dict(row) for row in cursor.fetchall()]


def get_cabin_by_id(cabin_id: int) -> dict:
    """
    Get cabin by ID.

    Args:
        cabin_id: Cabin ID

    Returns:
        Cabin dict or None if not found
    """
    db = get_db()
    cursor = db.cursor()
    cursor.execute('SELECT * FROM cabins WHERE id = ?', (cabin_id,))
    row = cursor.fetchone()
    return dict(row) if row else None


# =============================================================================
# STATUS
# =============================================================================

def set_cabin_status(cabin_id: int, new_status: str, cursor=None) -> bool:
    """
    Write a cabin's manual status. Touches nothing but status/updated_at.

    Args:
        cabin_id: Cabin ID
        new_status: One of CABIN_STATUSES
        cursor: Active transaction cursor (caller commits); when omitted the
            write is committed here

    Returns:
        True if the cabin exists and was updated

    Raises:
        InvalidInput: If new_status is not a cabin status
    """
    if new_status not in CABIN_STATUSES:
        raise InvalidInput(f'Invalid cabin status: {new_status}')

    db = get_db()
    cur = cursor or db.cursor()
    cur.execute('''
        UPDATE cabins
        SET status = ?, updated_at = CURRENT_TIMESTAMP
        WHERE id = ?
    ''', (new_status, cabin_id))

    if cursor is None:
        db.commit()

    return cur.rowcount > 0


# =============================================================================
# ADMINISTRATIVE CRUD
# =============================================================================

def _validate_capacity(capacity) -> int:
    if isinstance(capacity, bool):
        raise InvalidInput('capacity must be a positive integer')
    try:
        capacity = int(capacity)
    except (TypeError, ValueError):
        raise InvalidInput('capacity must be a positive integer')
    if capacity <= 0:
        raise InvalidInput('capacity must be a positive integer')
    return capacity


def create_cabin(name: str, capacity: int, guest: str = '', status: str = 'available') -> int:
    """
    Create new cabin.

    Args:
        name: Display name
        capacity: Seats/beds, positive integer
        guest: Optional guest label
        status: Initial manual status

    Returns:
        New cabin ID
    """
    name = (name or '').strip()
    if not name:
        raise InvalidInput('name is required')
    capacity = _validate_capacity(capacity)
    if status not in CABIN_STATUSES:
        raise InvalidInput(f'Invalid cabin status: {status}')

    db = get_db()
    cursor = db.cursor()
    cursor.execute('''
        INSERT INTO cabins (name, capacity, status, guest)
        VALUES (?, ?, ?, ?)
    ''', (name, capacity, status, guest or ''))
    db.commit()

    logger.info('Cabin %s created (%s, capacity %s)', cursor.lastrowid, name, capacity)
    return cursor.lastrowid


def update_cabin(cabin_id: int, **kwargs) -> bool:
    """
    Update cabin fields.

    Turning ``active`` off is a soft delete and takes the same guard as
    delete_cabin.

    Args:
        cabin_id: Cabin ID to update
        **kwargs: Fields to update (name, capacity, guest, active)

    Returns:
        True if updated successfully

    Raises:
        CabinInUse: Deactivating a cabin that has active reservations
    """
    allowed_fields = ['name', 'capacity', 'guest', 'active']
    updates = []
    values = []

    for field in allowed_fields:
        if field not in kwargs:
            continue
        value = kwargs[field]
        if field == 'capacity':
            value = _validate_capacity(value)
        elif field == 'name':
            value = (value or '').strip()
            if not value:
                raise InvalidInput('name is required')
        elif field == 'active':
            value = 1 if value else 0
        updates.append(f'{field} = ?')
        values.append(value)

    if not updates:
        return False

    deactivating = 'active' in kwargs and not kwargs['active']

    updates.append('updated_at = CURRENT_TIMESTAMP')
    values.append(cabin_id)
    query = f'UPDATE cabins SET {", ".join(updates)} WHERE id = ?'

    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        if deactivating:
            _guard_not_in_use(cursor, cabin_id)

        cursor.execute(query, values)
        db.commit()

    except sqlite3.Error as e:
        db.rollback()
        logger.error('Update failed for cabin %s: %s', cabin_id, e)
        raise StorageFailure('Could not update cabin') from e

    return cursor.rowcount > 0


def count_active_reservations(cabin_id: int, cursor=None) -> int:
    """Count reserved/occupied reservations referencing a cabin."""
    cur = cursor or get_db().cursor()
    placeholders = ','.join('?' * len(ACTIVE_STATUSES))
    cur.execute(f'''
        SELECT COUNT(*) as count FROM cabin_reservations
        WHERE cabin_id = ? AND status IN ({placeholders})
    ''', (cabin_id, *ACTIVE_STATUSES))
    return cur.fetchone()['count']


def _guard_not_in_use(cursor, cabin_id: int):
    # Runs under the caller's BEGIN IMMEDIATE so no booking lands in between
    active_count = count_active_reservations(cabin_id, cursor=cursor)
    if active_count > 0:
        get_db().rollback()
        raise CabinInUse(
            'Cannot delete a cabin with active reservations',
            active_reservations=active_count
        )


def delete_cabin(cabin_id: int) -> bool:
    """
    Soft delete cabin (set active = 0).
    Only allowed if no active reservations reference it; the check and the
    update share one BEGIN IMMEDIATE transaction.

    Args:
        cabin_id: Cabin ID to delete

    Returns:
        True if deleted successfully

    Raises:
        CabinInUse: If the cabin has active reservations
        StorageFailure: Database error
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        _guard_not_in_use(cursor, cabin_id)

        cursor.execute('''
            UPDATE cabins SET active = 0, updated_at = CURRENT_TIMESTAMP
            WHERE id = ? AND active = 1
        ''', (cabin_id,))
        db.commit()

    except sqlite3.Error as e:
        db.rollback()
        logger.error('Delete failed for cabin %s: %s', cabin_id, e)
        raise StorageFailure('Could not delete cabin') from e

    if cursor.rowcount > 0:
        logger.info('Cabin %s deactivated', cabin_id)
    return cursor.rowcount > 0
