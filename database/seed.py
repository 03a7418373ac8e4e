"""
Database seed data.
Demo cabins for fresh installations and local development.
"""

DEMO_CABINS = [
    # (name, capacity, status, guest)
    ('Cabin 1', 6, 'available', ''),
    ('Cabin 2', 4, 'available', ''),
    ('Cabin 3', 2, 'available', ''),
    ('Cabin 4', 6, 'available', ''),
    ('Cabin 5', 4, 'available', ''),
    ('Cabin 6', 2, 'available', ''),
]


def seed_database(db):
    """Insert the demo cabins."""
    for name, capacity, status, guest in DEMO_CABINS:
        db.execute('''
            INSERT INTO cabins (name, capacity, status, guest)
            VALUES (?, ?, ?, ?)
        ''', (name, capacity, status, guest))
