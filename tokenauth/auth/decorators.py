"""Authentication decorators for protected endpoints.

@auth_required resolves the bearer token once per request and hands the
result to the endpoint as an explicit ``identity`` argument:

    @auth_bp.get("/profile")
    @auth_required
    def profile(identity: Identity):
        ...
"""

import logging
from functools import wraps

import jwt
from flask import request

from ..db import Core, get_core
from ..exceptions import AuthenticationError
from . import service, token
from .schemas import Identity

logger = logging.getLogger(__name__)

UNAUTHENTICATED = "Unauthenticated."


def _bearer_token() -> str:
    """
    Extract the token from the Authorization header.

    Raises:
        AuthenticationError: If the header is missing or not a Bearer header
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token_str = auth_header.partition(" ")
    if scheme.lower() != "bearer" or not token_str.strip():
        logger.warning("Request to protected endpoint without bearer token")
        raise AuthenticationError(UNAUTHENTICATED, {"code": "missing_auth"})
    return token_str.strip()


def _authenticate_request(core: Core) -> Identity:
    """
    Resolve the request's bearer token to an Identity.

    The token must have a valid signature, must not be expired, must still
    have its personal_access_tokens row and must belong to an existing user.
    On success the token's last_used_at is updated.

    Raises:
        AuthenticationError: If any of the above does not hold
    """
    token_str = _bearer_token()

    try:
        payload = token.validate_access_token(token_str)
        user_id = payload.user_id
    except jwt.ExpiredSignatureError:
        logger.warning("Expired token presented")
        raise AuthenticationError(UNAUTHENTICATED, {"code": "token_expired"})
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.warning(f"Invalid token presented: {e}")
        raise AuthenticationError(UNAUTHENTICATED, {"code": "invalid_token"})

    row = core.token.get_by_jti(payload.jti)
    if row is None or row["user_id"] != user_id:
        logger.warning(f"Revoked token presented for user {payload.sub}")
        raise AuthenticationError(UNAUTHENTICATED, {"code": "token_revoked"})

    user = service.get_user_by_id(core, user_id)
    if user is None:
        logger.warning(f"Token presented for missing user {user_id}")
        raise AuthenticationError(UNAUTHENTICATED, {"code": "user_not_found"})

    core.token.touch(row["id"])

    logger.debug(f"Token authentication successful for user {user.id}")
    return Identity(
        user=user,
        token_id=row["id"],
        abilities=core.token.abilities_of(row),
    )


def auth_required(f):
    """
    Decorator to require a valid bearer token.

    The wrapped endpoint receives the resolved Identity as the ``identity``
    keyword argument.

    Raises:
        AuthenticationError: If no valid token is provided
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        with get_core(atomic=True) as core:
            identity = _authenticate_request(core)
        return f(*args, identity=identity, **kwargs)

    return wrapper
