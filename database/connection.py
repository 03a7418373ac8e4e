"""
Database connection management.
Handles per-request connections, initialization, and teardown.
"""

import logging
import sqlite3
from flask import g, current_app

logger = logging.getLogger(__name__)


def get_db():
    """
    Get the database connection for the current app context.

    Each request (and each thread with its own app context) gets its own
    connection, so no connection object is ever shared between threads.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/cabins.db')
        g.db = sqlite3.connect(
            db_path,
            detect_types=sqlite3.PARSE_DECLTYPES,
            timeout=current_app.config.get('DATABASE_BUSY_TIMEOUT', 5.0)
        )
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # Enable WAL mode for better concurrency
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        if db.in_transaction:
            db.rollback()
        db.close()


def init_db(with_seed: bool = False):
    """
    Initialize database: drop existing tables, create new schema.
    WARNING: This will delete all existing data!

    Args:
        with_seed: Also insert the demo cabins
    """
    from database.schema import drop_tables, create_tables, create_indexes, create_triggers
    from database.seed import seed_database

    db = get_db()

    # Drop existing tables (in reverse order of dependencies)
    drop_tables(db)

    # Create all tables
    create_tables(db)

    # Create indexes and overlap guards
    create_indexes(db)
    create_triggers(db)

    if with_seed:
        seed_database(db)

    db.commit()
    logger.info('Database initialized at %s', current_app.config.get('DATABASE_PATH'))
