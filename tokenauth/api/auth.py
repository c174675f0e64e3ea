"""Authentication endpoints for tokenauth.

These endpoints handle user authentication:
- POST /register - Create account, return a bearer token
- POST /login - Verify credentials, return a new bearer token
- GET /profile - Current user info (bearer token required)
- GET /logout - Revoke every token of the current user (bearer token required)

All endpoints return the response envelope from api.responses. Failures are
raised as exceptions and rendered by the error handlers in main.py.
"""

import logging

from flask import Blueprint

from ..auth import service, token
from ..auth.decorators import auth_required
from ..auth.schemas import Identity, LoginRequest, RegisterRequest
from ..db import get_core
from ..exceptions import AuthenticationError
from .responses import success
from .validation import validate_request

logger = logging.getLogger(__name__)

CREDENTIALS_MISMATCH = "Email & password does not match with our record"


# Create blueprint
auth_bp = Blueprint("auth", __name__)


def _registration_context() -> dict:
    """Validation context enabling the email uniqueness rule."""
    return {"core": get_core()}


# ============================================================================
# Registration and Login
# ============================================================================


@auth_bp.post("/register")
@validate_request(context=_registration_context)
def register(data: RegisterRequest):
    """
    Create a user account and issue its first token.

    Example request:
    ```json
    {"name": "Ada", "email": "ada@example.com", "password": "secret"}
    ```

    Example response (201):
    ```json
    {
        "status": true,
        "message": "User created successfully",
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
    }
    ```
    """
    with get_core(atomic=True) as core:
        user = service.create_user(core, data)
        access_token = token.issue_token(core, user)

    logger.info(f"User registered: {user.id}")

    return success("User created successfully", 201, token=access_token)


@auth_bp.post("/login")
@validate_request
def login(data: LoginRequest):
    """
    Authenticate a user and issue a new token.

    Previously issued tokens stay valid. An unknown email and a wrong
    password produce the same 401 response.

    Example request:
    ```json
    {"email": "ada@example.com", "password": "secret"}
    ```

    Example response (200):
    ```json
    {
        "status": true,
        "message": "User logged in successfully",
        "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9..."
    }
    ```
    """
    with get_core(atomic=True) as core:
        user = service.verify_credentials(core, data.email, data.password)
        if user is None:
            logger.warning(f"Failed login attempt for email: {data.email}")
            raise AuthenticationError(CREDENTIALS_MISMATCH)

        access_token = token.issue_token(core, user)

    logger.info(f"Successful login: {user.id}")

    return success("User logged in successfully", token=access_token)


# ============================================================================
# Authenticated Endpoints
# ============================================================================


@auth_bp.get("/profile")
@auth_required
def profile(identity: Identity):
    """
    Get the authenticated user's profile.

    Example response (200):
    ```json
    {
        "status": true,
        "message": "Profile information",
        "data": {
            "id": 1,
            "name": "Ada",
            "email": "ada@example.com",
            "created_at": "2026-10-19T10:30:00Z",
            "updated_at": "2026-10-19T10:30:00Z"
        },
        "id": 1
    }
    ```
    """
    user = identity.user
    return success("Profile information", data=user.model_dump(mode="json"), id=user.id)


@auth_bp.get("/logout")
@auth_required
def logout(identity: Identity):
    """
    Revoke every token of the authenticated user, ending all sessions.

    Example response (200):
    ```json
    {"status": true, "message": "User logged out", "data": []}
    ```
    """
    with get_core(atomic=True) as core:
        token.revoke_user_tokens(core, identity.user.id)

    logger.info(f"User logged out: {identity.user.id}")

    return success("User logged out", data=[])
