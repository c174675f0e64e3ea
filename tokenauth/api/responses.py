"""Response envelope shared by every endpoint.

Every response body, success or failure, is a JSON object with a ``status``
boolean and a ``message`` string, plus an operation-specific payload:

    {"status": true, "message": "User logged in successfully", "token": "..."}
    {"status": false, "message": "validation error", "errors": {...}}
"""

from flask import Response, jsonify


def envelope(status: bool, message: str, http_status: int, **payload) -> tuple[Response, int]:
    """Build a JSON envelope response.

    Args:
        status: Whether the operation succeeded
        message: Human readable outcome
        http_status: HTTP status code
        **payload: Extra top-level keys (token, data, id, errors, error)

    Returns:
        (response, status code) tuple as accepted by Flask views
    """
    body = {"status": status, "message": message}
    body.update(payload)
    return jsonify(body), http_status


def success(message: str, http_status: int = 200, **payload) -> tuple[Response, int]:
    return envelope(True, message, http_status, **payload)


def failure(message: str, http_status: int, **payload) -> tuple[Response, int]:
    return envelope(False, message, http_status, **payload)
