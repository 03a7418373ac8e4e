"""
Manual cabin status override.

Staff cycle a cabin's display status available -> reserved -> occupied ->
available without touching the reservation calendar.
"""

import logging
import sqlite3

from database import get_db
from .cabin import CABIN_STATUSES, set_cabin_status
from .errors import NotFound, StorageFailure

logger = logging.getLogger(__name__)


def next_status(current: str) -> str:
    """
    Next status in the fixed cycle.

    An unrecognised status restarts the cycle at 'reserved'.
    """
    if current not in CABIN_STATUSES:
        return 'reserved'
    return CABIN_STATUSES[(CABIN_STATUSES.index(current) + 1) % len(CABIN_STATUSES)]


def advance_cabin_status(cabin_id: int) -> str:
    """
    Advance a cabin one step through the status cycle.

    Read and write happen in one BEGIN IMMEDIATE transaction, so two staff
    members clicking at once produce two consecutive steps, never a lost one.

    Args:
        cabin_id: Cabin ID

    Returns:
        The new status

    Raises:
        NotFound: Cabin does not exist
        StorageFailure: Database error
    """
    db = get_db()
    cursor = db.cursor()

    try:
        cursor.execute('BEGIN IMMEDIATE')

        cursor.execute('SELECT status FROM cabins WHERE id = ? AND active = 1', (cabin_id,))
        row = cursor.fetchone()
        if not row:
            db.rollback()
            raise NotFound(f'Cabin {cabin_id} not found', cabin_id=cabin_id)

        old_status = row['status']
        new_status = next_status(old_status)
        set_cabin_status(cabin_id, new_status, cursor=cursor)

        db.commit()

    except sqlite3.Error as e:
        db.rollback()
        logger.error('Status override failed for cabin %s: %s', cabin_id, e)
        raise StorageFailure('Could not update cabin status') from e

    logger.info('Cabin %s status override: %s -> %s', cabin_id, old_status, new_status)
    return new_status
