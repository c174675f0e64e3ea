"""Tests for Core API database interface.

Behavior-focused tests using real SQLite.
No mocks - testing observable behavior.
"""

import sqlite3

import pytest

from tokenauth.config import settings
from tokenauth.db import Core, _create_connection, get_core, init_db
from tokenauth.db.token import TokenOperations
from tokenauth.db.user import UserOperations
from tokenauth.exceptions import DatabaseError


# ============================================================================
# _create_connection tests
# ============================================================================

def test_create_connection_returns_connection(client):
    """_create_connection() should return a valid SQLite connection."""
    conn = _create_connection()
    assert isinstance(conn, sqlite3.Connection)
    assert conn.row_factory == sqlite3.Row
    conn.close()


def test_create_connection_enables_foreign_keys(client):
    conn = _create_connection()
    result = conn.execute("PRAGMA foreign_keys").fetchone()
    assert result[0] == 1
    conn.close()


def test_create_connection_unavailable_store_raises_database_error(tmp_path, monkeypatch):
    """A path that cannot be opened as a database should raise DatabaseError."""
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("")
    monkeypatch.setattr(settings, "database_path", str(blocker / "auth.db"))
    with pytest.raises(DatabaseError) as exc_info:
        _create_connection()
    assert exc_info.value.message == "Database unavailable"


# ============================================================================
# get_core() and properties
# ============================================================================

def test_get_core_modes(client):
    assert get_core()._atomic is False
    assert get_core(atomic=True)._atomic is True


def test_operations_are_cached(core):
    assert isinstance(core.user, UserOperations)
    assert isinstance(core.token, TokenOperations)
    assert core.user is core.user
    assert core.token is core.token


def test_chained_read_keeps_connection_open(client):
    with get_core(atomic=True) as core:
        core.user.create("Ada", "ada@example.com", "hash")

    row = get_core().user.get_by_email("ada@example.com")
    tokens = get_core().token.list_for_user(row["id"])
    assert row["name"] == "Ada"
    assert tokens == []


# ============================================================================
# Atomic context manager
# ============================================================================

def test_non_atomic_core_rejects_context_manager(core):
    with pytest.raises(RuntimeError):
        with core:
            pass


def test_atomic_commits_on_success(client):
    with get_core(atomic=True) as core:
        core.user.create("Ada", "ada@example.com", "hash")

    assert get_core().user.email_exists("ada@example.com")


def test_atomic_rolls_back_on_exception(client):
    with pytest.raises(ValueError):
        with get_core(atomic=True) as core:
            core.user.create("Ada", "ada@example.com", "hash")
            raise ValueError("boom")

    assert not get_core().user.email_exists("ada@example.com")


# ============================================================================
# init_db
# ============================================================================

def test_init_db_creates_tables(tmp_path, monkeypatch):
    db_path = tmp_path / "nested" / "auth.db"
    monkeypatch.setattr(settings, "database_path", str(db_path))
    init_db()

    conn = sqlite3.connect(str(db_path))
    tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
    conn.close()

    assert {"_schema_metadata", "users", "personal_access_tokens"} <= tables


def test_init_db_is_idempotent(tmp_path, monkeypatch):
    db_path = tmp_path / "auth.db"
    monkeypatch.setattr(settings, "database_path", str(db_path))
    init_db()

    with get_core(atomic=True) as core:
        core.user.create("Ada", "ada@example.com", "hash")

    init_db()
    assert get_core().user.count() == 1


def test_schema_version(test_db):
    row = test_db.execute(
        "SELECT value FROM _schema_metadata WHERE key = 'version'"
    ).fetchone()
    assert row[0] == "20261019"
