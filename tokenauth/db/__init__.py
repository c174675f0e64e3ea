"""Database module for tokenauth.

This module provides the Core API for credential store operations.
Core encapsulates connection management and provides access to the
user and token operations.

ARCHITECTURE:
- Core owns its connection (no Flask g.db dependency)
- Connection closes on context exit (atomic=True) or when the Core is
  garbage collected (atomic=False)
- Each table gets an encapsulated operations class

Write paths use the atomic form so a user row and its first token commit
together:

    with get_core(atomic=True) as core:
        user_id = core.user.create(name, email, password_hash)
        core.token.create(user_id, ...)

Read paths use the autocommit form:

    row = get_core().user.get_by_email(email)
"""

from pathlib import Path
from typing import TYPE_CHECKING
import logging
import sqlite3

from ..config import settings
from ..exceptions import DatabaseError
from ..schema import load_schema

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from .token import TokenOperations
    from .user import UserOperations


class Core:
    """
    Database Core with user and token operations.

    Connection Lifecycle:
    - atomic=True: Connection closes on __exit__ from context manager
    - atomic=False: Connection closes when the Core is garbage collected
    """

    def __init__(self, connection: sqlite3.Connection, atomic: bool = False):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
            atomic: If True, Core MUST be used as context manager.
                    If False, callers commit their own writes.
        """
        self._conn = connection
        self._atomic = atomic
        self._user_ops = None
        self._token_ops = None

    @property
    def user(self) -> "UserOperations":
        """User operations (lazy-loaded and cached)."""
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn, core=self)
        return self._user_ops

    @property
    def token(self) -> "TokenOperations":
        """Personal access token operations (lazy-loaded and cached)."""
        if self._token_ops is None:
            from .token import TokenOperations
            self._token_ops = TokenOperations(self._conn, core=self)
        return self._token_ops

    def __enter__(self) -> "Core":
        """Enter context manager for atomic transaction.

        Raises:
            RuntimeError: If Core was not created with atomic=True
        """
        if not self._atomic:
            raise RuntimeError(
                "Core must be created with atomic=True for context manager use. "
                "Use: with db.get_core(atomic=True) as core:"
            )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back the transaction."""
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()

    def __del__(self):
        """Close the connection if still open.

        Errors are ignored since the connection may already be closed.
        """
        if hasattr(self, "_conn") and self._conn:
            try:
                self._conn.close()
            except Exception:
                pass


def _create_connection() -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row
        and foreign keys enabled.

    Raises:
        DatabaseError: If the database file cannot be opened
    """
    db_path = Path(settings.database_path)
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
    except (OSError, sqlite3.Error) as e:
        logger.error(f"Cannot open database at {db_path}: {e}")
        raise DatabaseError("Database unavailable") from e
    return conn


def get_core(atomic: bool = False) -> Core:
    """
    Get a database Core instance.

    Args:
        atomic: If True, returns a Core that MUST be used as context manager.
                Use for operations that need to commit together.
                If False (default), returns a Core for reads.

    Returns:
        Core instance with user/token operations

    Raises:
        DatabaseError: If the database cannot be opened
    """
    conn = _create_connection()
    return Core(conn, atomic=atomic)


# ============================================================================
# DATABASE INITIALIZATION
# ============================================================================

def init_db():
    """Initialize database by running schema.sql if not already initialized."""
    db_path = Path(settings.database_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    with sqlite3.connect(str(db_path)) as db:
        cursor = db.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
        )
        if cursor.fetchone():
            # Database already initialized, skip
            return

        db.executescript(load_schema())
        db.commit()
        logger.info(f"Applied schema to {db_path}")
