"""Unique identifier generation.

This is the ONLY module that should import uuid4. Token identifiers (the
JWT ``jti`` claim) are generated here.
"""

from uuid import uuid4


def generate_token_id() -> str:
    """Generate a random token identifier (32 hex characters)."""
    return uuid4().hex
