"""Personal access token operations.

Each issued bearer token has one row here, keyed by its ``jti``. A token is
only accepted while its row exists, so deleting rows revokes tokens.

IMPORT CONVENTION:
- Core accesses these through core.token property
"""

import json
import sqlite3
from typing import TYPE_CHECKING

from ..utils import isodatetime

if TYPE_CHECKING:
    from . import Core


class TokenOperations:
    """Persist, look up and revoke personal access tokens."""

    def __init__(self, conn: sqlite3.Connection, core: "Core | None" = None):
        """Initialize token operations with a database connection.

        Args:
            conn: SQLite connection with row_factory set to sqlite3.Row
            core: Owning Core, kept referenced so its connection stays open
                  for as long as these operations are in use.
        """
        self._conn = conn
        self._core = core

    def create(
        self,
        user_id: int,
        name: str,
        jti: str,
        abilities: list[str],
        expires_at: str | None = None
    ) -> int:
        """Record an issued token.

        Args:
            user_id: Owning user
            name: Token name (e.g. "API TOKEN")
            jti: Unique token identifier embedded in the JWT
            abilities: Abilities granted to the token
            expires_at: ISO 8601 expiry, or None for a non-expiring token

        Returns:
            The token row ID
        """
        cursor = self._conn.execute(
            """INSERT INTO personal_access_tokens
                   (user_id, name, jti, abilities, expires_at, created_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (user_id, name, jti, json.dumps(abilities), expires_at, isodatetime.now())
        )
        return cursor.lastrowid

    def get_by_jti(self, jti: str) -> sqlite3.Row | None:
        cursor = self._conn.execute(
            "SELECT * FROM personal_access_tokens WHERE jti = ?",
            (jti,)
        )
        return cursor.fetchone()

    def list_for_user(self, user_id: int) -> list[sqlite3.Row]:
        cursor = self._conn.execute(
            "SELECT * FROM personal_access_tokens WHERE user_id = ? ORDER BY id",
            (user_id,)
        )
        return cursor.fetchall()

    def touch(self, token_id: int) -> None:
        """Set last_used_at to now."""
        self._conn.execute(
            "UPDATE personal_access_tokens SET last_used_at = ? WHERE id = ?",
            (isodatetime.now(), token_id)
        )

    def delete_for_user(self, user_id: int) -> int:
        """Delete every token owned by a user.

        Returns:
            Number of tokens deleted
        """
        cursor = self._conn.execute(
            "DELETE FROM personal_access_tokens WHERE user_id = ?",
            (user_id,)
        )
        return cursor.rowcount

    def delete_expired(self, now: str | None = None) -> int:
        """Delete tokens whose expiry has passed.

        ISO 8601 UTC strings sort chronologically, so a string comparison
        is enough.

        Returns:
            Number of tokens deleted
        """
        cursor = self._conn.execute(
            """DELETE FROM personal_access_tokens
               WHERE expires_at IS NOT NULL AND expires_at <= ?""",
            (now or isodatetime.now(),)
        )
        return cursor.rowcount

    @staticmethod
    def abilities_of(row: sqlite3.Row) -> list[str]:
        """Decode the abilities JSON column of a token row."""
        return json.loads(row["abilities"])
