"""Authentication module for tokenauth.

This module provides authentication and authorization functionality:
- Schema validation for auth operations
- Password hashing and credential verification
- Bearer token issuance, validation and revocation
- The @auth_required guard for protected endpoints

Auth endpoints live in tokenauth.api.auth (mounted under settings.api_prefix):
- POST /register - Create account and return a token
- POST /login - Authenticate and return a token
- GET /profile - Get current user info
- GET /logout - Revoke every token of the current user
"""

from . import schemas, service, token

__all__ = ["schemas", "service", "token"]
