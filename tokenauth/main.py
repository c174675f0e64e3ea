"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from .config import settings
from .db import get_core, init_db
from .exceptions import AuthenticationError, TokenAuthError, ValidationError
from .api.responses import failure

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


# Create Flask app
app = Flask(__name__)

# CORS configuration
CORS(app, origins=settings.cors_origins, supports_credentials=True)


# Database initialization (runs once on app startup)
def initialize_database():
    """Initialize database on app startup."""
    try:
        init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise


with app.app_context():
    initialize_database()


# Error handlers
@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Handle ValidationError exceptions."""
    return failure(error.message, error.status_code, errors=error.details)


@app.errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handle AuthenticationError exceptions."""
    return failure(error.message, error.status_code)


@app.errorhandler(TokenAuthError)
def handle_token_auth_error(error):
    """Handle the remaining TokenAuthError kinds (e.g. DatabaseError)."""
    logger.error(f"{error.__class__.__name__}: {error.message}")
    return failure(
        error.message,
        error.status_code,
        error={"type": error.__class__.__name__}
    )


@app.errorhandler(HTTPException)
def handle_http_exception(error):
    """Handle routing and protocol errors (404, 405, ...)."""
    return failure(error.description, error.code)


@app.errorhandler(Exception)
def handle_internal_error(error):
    """Handle unexpected exceptions without exposing their details."""
    logger.exception(f"Internal error: {error}")
    return failure(
        "Internal server error",
        500,
        error={"type": "InternalServerError"}
    )


# Health check endpoint
@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


# CLI commands
@app.cli.command("prune-tokens")
def prune_tokens_command():
    """Delete expired personal access tokens."""
    from .auth.token import prune_expired_tokens

    with get_core(atomic=True) as core:
        count = prune_expired_tokens(core)
    print(f"Pruned {count} expired token(s)")


# Register API blueprints
from .api.auth import auth_bp

app.register_blueprint(auth_bp, url_prefix=settings.api_prefix)


if __name__ == "__main__":
    app.run(debug=True)
