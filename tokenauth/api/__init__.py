"""HTTP API for tokenauth.

- auth: register, login, profile and logout endpoints
- responses: the {status, message, ...} response envelope
- validation: the @validate_request decorator
"""
