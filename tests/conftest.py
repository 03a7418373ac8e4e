"""
Pytest configuration and fixtures.
Ensures tests use an isolated test database, not the production database.
"""

import os
import sys
import pytest
import tempfile

# Make the project root importable when pytest runs from elsewhere
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test database path BEFORE importing app
# A file (not :memory:) so threads in concurrency tests share one database
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), 'hiraya_cabins_test.db')
os.environ['DATABASE_PATH'] = TEST_DB_PATH


@pytest.fixture(scope='session', autouse=True)
def setup_test_environment():
    """Set up test environment before any tests run."""
    os.environ['DATABASE_PATH'] = TEST_DB_PATH
    os.environ['FLASK_ENV'] = 'test'

    yield

    # Cleanup: remove test database after all tests
    for suffix in ('', '-wal', '-shm'):
        path = TEST_DB_PATH + suffix
        if os.path.exists(path):
            try:
                os.remove(path)
            except PermissionError:
                pass  # Windows may have file locked


@pytest.fixture
def app():
    """Create test application with an empty, freshly created schema."""
    from app import create_app
    from database import init_db

    app = create_app('test')
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    app.config['DATABASE_PATH'] = TEST_DB_PATH

    with app.app_context():
        init_db()
        yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def cabin(app):
    """Cabin 1: capacity 6, available."""
    from models.cabin import create_cabin, get_cabin_by_id

    cabin_id = create_cabin(name='Cabin 1', capacity=6)
    return get_cabin_by_id(cabin_id)


@pytest.fixture
def cabins(app):
    """Three cabins seating 6, 4 and 2."""
    from models.cabin import create_cabin, get_cabin_by_id

    ids = [
        create_cabin(name='Cabin 1', capacity=6),
        create_cabin(name='Cabin 2', capacity=4),
        create_cabin(name='Cabin 3', capacity=2),
    ]
    return [get_cabin_by_id(cabin_id) for cabin_id in ids]
