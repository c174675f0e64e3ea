"""Shared test fixtures for tokenauth."""

import os
import tempfile
import sqlite3

# Fast bcrypt and a throwaway database for the import-time init_db()
os.environ.setdefault("BCRYPT_WORK_FACTOR", "4")
os.environ.setdefault(
    "DATABASE_PATH", os.path.join(tempfile.mkdtemp(prefix="tokenauth-"), "tokenauth.db")
)

import pytest

from tokenauth.main import app
from tokenauth.config import settings
from tokenauth.db import Core, get_core, init_db
from tokenauth.schema import load_schema
from tokenauth.auth import schemas, service, token as auth_token


@pytest.fixture
def test_db():
    """Create in-memory test database with schema."""
    db = sqlite3.connect(":memory:")
    db.row_factory = sqlite3.Row

    # Enable foreign key constraints (required for SQLite)
    db.execute("PRAGMA foreign_keys = ON")

    db.executescript(load_schema())
    db.commit()

    yield db

    db.close()


@pytest.fixture
def core(test_db):
    """Core wrapping the in-memory test database."""
    return Core(test_db)


@pytest.fixture
def test_user(core):
    """Create a test user.

    Returns a tuple of (user, password) where user is the UserResponse schema
    and password is the plain text password.
    """
    password = "TestPass123"
    data = schemas.RegisterRequest(name="Test User", email="test@example.com", password=password)
    user = service.create_user(core, data)
    core._conn.commit()
    return user, password


@pytest.fixture
def jwt_token(core, test_user):
    """Issue a token for the test user in the in-memory database."""
    user, _password = test_user
    issued = auth_token.issue_token(core, user)
    core._conn.commit()
    return issued


@pytest.fixture
def client():
    """Create test client for API testing.

    Each test gets a fresh temp file database.
    """
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(db_path)

    original_db_path = settings.database_path
    try:
        settings.database_path = db_path
        init_db()

        app.config['TESTING'] = True
        with app.test_client() as client:
            yield client

    finally:
        settings.database_path = original_db_path
        try:
            os.unlink(db_path)
        except OSError:
            pass


@pytest.fixture
def authenticated_client(client):
    """Test client plus a stored user and a valid bearer token.

    Returns a tuple of (client, user, auth_headers).
    """
    with get_core(atomic=True) as core:
        data = schemas.RegisterRequest(
            name="Test User", email="test@example.com", password="TestPass123"
        )
        user = service.create_user(core, data)
        jwt_token = auth_token.issue_token(core, user)

    return client, user, {"Authorization": f"Bearer {jwt_token}"}
