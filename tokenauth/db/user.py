"""User record operations.

IMPORT CONVENTION:
- Core accesses these through core.user property
- NO direct import needed when using Core API

User IDs are INTEGER PRIMARY KEY AUTOINCREMENT values assigned by SQLite.
Email uniqueness is enforced by the unique index on users(email), which
compares case-insensitively (COLLATE NOCASE).
"""

import sqlite3
from typing import TYPE_CHECKING

from ..utils import isodatetime

if TYPE_CHECKING:
    from . import Core


class UserOperations:
    """Create and look up user records."""

    def __init__(self, conn: sqlite3.Connection, core: "Core | None" = None):
        """Initialize user operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            core: Owning Core, kept referenced so its connection stays open
                  for as long as these operations are in use.
        """
        self._conn = conn
        self._core = core

    def create(self, name: str, email: str, password_hash: str) -> int:
        """Insert a user record.

        Args:
            name: Display name
            email: Email address (must be unique)
            password_hash: Already-hashed password

        Returns:
            The new user's ID

        Raises:
            sqlite3.IntegrityError: If the email already exists
        """
        now = isodatetime.now()
        cursor = self._conn.execute(
            """INSERT INTO users (name, email, password_hash, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?)""",
            (name, email, password_hash, now, now)
        )
        return cursor.lastrowid

    def get_by_id(self, user_id: int) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        )
        return cursor.fetchone()

    def get_by_email(self, email: str) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT * FROM users WHERE email = ?",
            (email,)
        )
        return cursor.fetchone()

    def email_exists(self, email: str) -> bool:
        """Check whether a user with this email is already registered."""
        cursor = self._conn.execute(
            "SELECT 1 FROM users WHERE email = ? LIMIT 1",
            (email,)
        )
        return cursor.fetchone() is not None

    def count(self) -> int:
        cursor = self._conn.execute("SELECT COUNT(*) FROM users")
        return cursor.fetchone()[0]
