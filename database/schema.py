"""
Database schema definitions.
Table creation, indexes, and the overlap triggers guarding reservations.
"""

from models.reservation_overlap import ACTIVE_STATUSES

_ACTIVE_SQL = ', '.join(f"'{s}'" for s in ACTIVE_STATUSES)


def drop_tables(db):
    """Drop all existing tables."""
    # Disable foreign key constraints before dropping
    db.execute('PRAGMA foreign_keys = OFF')

    tables = [
        'cabin_reservations',
        'cabins',
    ]

    for table in tables:
        db.execute(f'DROP TABLE IF EXISTS {table}')

    # Re-enable foreign key constraints
    db.execute('PRAGMA foreign_keys = ON')


def create_tables(db):
    """Create all database tables."""

    db.execute('''
        CREATE TABLE cabins (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            capacity INTEGER NOT NULL CHECK (capacity > 0),
            status TEXT NOT NULL DEFAULT 'available'
                CHECK (status IN ('available', 'reserved', 'occupied')),
            guest TEXT DEFAULT '',
            active INTEGER DEFAULT 1,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    ''')

    # start_at / end_at are the canonical interval ('YYYY-MM-DD HH:MM:SS');
    # calendar day and HH:MM fields are derived for display only.
    db.execute('''
        CREATE TABLE cabin_reservations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            cabin_id INTEGER NOT NULL REFERENCES cabins(id) ON DELETE RESTRICT,
            start_at TEXT NOT NULL,
            end_at TEXT NOT NULL,
            guest TEXT DEFAULT '',
            party_size INTEGER CHECK (party_size IS NULL OR party_size > 0),
            status TEXT NOT NULL DEFAULT 'reserved'
                CHECK (status IN ('reserved', 'occupied', 'cancelled')),
            notes TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            CHECK (end_at > start_at)
        )
    ''')


def create_indexes(db):
    """Create performance indexes."""
    db.execute('CREATE INDEX idx_cabins_active ON cabins(active)')
    db.execute('''
        CREATE INDEX idx_cabin_reservations_window
        ON cabin_reservations(cabin_id, status, start_at, end_at)
    ''')
    db.execute('CREATE INDEX idx_cabin_reservations_start ON cabin_reservations(start_at)')


def create_triggers(db):
    """
    Create triggers that abort any write leaving two active reservations
    overlapping on the same cabin.

    The booking service already checks inside a BEGIN IMMEDIATE transaction;
    these triggers hold the invariant for every other writer too. They abort
    with the message 'slot_conflict' (sqlite3.IntegrityError in Python).
    """
    db.execute(f'''
        CREATE TRIGGER trg_cabin_reservations_no_overlap_insert
        BEFORE INSERT ON cabin_reservations
        WHEN NEW.status IN ({_ACTIVE_SQL})
        BEGIN
            SELECT RAISE(ABORT, 'slot_conflict')
            WHERE EXISTS (
                SELECT 1 FROM cabin_reservations r
                WHERE r.cabin_id = NEW.cabin_id
                  AND r.status IN ({_ACTIVE_SQL})
                  AND r.start_at < NEW.end_at
                  AND r.end_at > NEW.start_at
            );
        END
    ''')

    db.execute(f'''
        CREATE TRIGGER trg_cabin_reservations_no_overlap_update
        BEFORE UPDATE OF cabin_id, start_at, end_at, status ON cabin_reservations
        WHEN NEW.status IN ({_ACTIVE_SQL})
        BEGIN
            SELECT RAISE(ABORT, 'slot_conflict')
            WHERE EXISTS (
                SELECT 1 FROM cabin_reservations r
                WHERE r.cabin_id = NEW.cabin_id
                  AND r.id != NEW.id
                  AND r.status IN ({_ACTIVE_SQL})
                  AND r.start_at < NEW.end_at
                  AND r.end_at > NEW.start_at
            );
        END
    ''')
