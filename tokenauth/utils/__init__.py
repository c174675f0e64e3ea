"""Utility functions for tokenauth.

Import convention: use module-level imports for clarity.

    from utils import isodatetime, uid
    timestamp = isodatetime.now()
    token_id = uid.generate_token_id()
"""

from . import isodatetime, uid

__all__ = ["isodatetime", "uid"]
