"""Bearer token issuance, validation and revocation.

Tokens are HS256-signed JWTs carrying the user ID (``sub``), a unique token
ID (``jti``), the issue time, the granted abilities and, unless the token is
non-expiring, ``exp``. Each issued token also gets a personal_access_tokens
row; a token whose row is gone has been revoked.
"""

import logging
from datetime import timedelta

import jwt

from ..config import settings
from ..db import Core
from ..utils import isodatetime, uid
from .schemas import TokenPayload, UserResponse

logger = logging.getLogger(__name__)


def issue_token(
    core: Core,
    user: UserResponse,
    name: str | None = None,
    abilities: list[str] | None = None,
    expires_in: timedelta | None = None,
) -> str:
    """
    Mint a bearer token for a user and record it.

    Existing tokens of the user are left untouched.

    Args:
        core: Database Core; the caller commits
        user: Token owner
        name: Token name, defaults to settings.token_name
        abilities: Granted abilities, defaults to settings.token_abilities
        expires_in: Lifetime, defaults to settings.token_expiry_days
            (no expiry when that setting is None)

    Returns:
        Encoded JWT string
    """
    name = name or settings.token_name
    abilities = list(abilities if abilities is not None else settings.token_abilities)
    if expires_in is None and settings.token_expiry_days is not None:
        expires_in = timedelta(days=settings.token_expiry_days)

    issued_at = isodatetime.utcnow()
    jti = uid.generate_token_id()

    payload = {
        "sub": str(user.id),
        "jti": jti,
        "iat": isodatetime.to_unix(issued_at),
        "abilities": abilities,
    }
    expires_at = None
    if expires_in is not None:
        expiry = issued_at + expires_in
        payload["exp"] = isodatetime.to_unix(expiry)
        expires_at = isodatetime.to_timestamp(expiry)

    core.token.create(user.id, name, jti, abilities, expires_at)

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def validate_access_token(token: str) -> TokenPayload:
    """
    Verify a token's signature and expiry and decode its claims.

    Does not check revocation; see decorators._authenticate_request.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or the signature is invalid
    """
    payload = jwt.decode(
        token,
        settings.jwt_secret_key,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "jti", "iat"]},
    )
    return TokenPayload(**payload)


def revoke_user_tokens(core: Core, user_id: int) -> int:
    """
    Revoke every token owned by a user.

    Returns:
        Number of tokens revoked
    """
    count = core.token.delete_for_user(user_id)
    logger.info(f"Revoked {count} token(s) for user {user_id}")
    return count


def prune_expired_tokens(core: Core) -> int:
    """
    Delete token rows whose expiry has passed.

    Returns:
        Number of rows deleted
    """
    count = core.token.delete_expired()
    logger.info(f"Pruned {count} expired token(s)")
    return count
