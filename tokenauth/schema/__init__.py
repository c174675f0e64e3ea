"""Schema module for tokenauth.

schema.sql is the source of truth for the data model. It is applied once by
db.init_db() on a fresh database.
"""

from pathlib import Path

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


def load_schema() -> str:
    """Return the schema SQL script."""
    return SCHEMA_PATH.read_text()


__all__ = ["SCHEMA_PATH", "load_schema"]
