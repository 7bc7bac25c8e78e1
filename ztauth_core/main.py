"""Flask application entry point."""

import logging

from flask import Flask, jsonify
from flask_cors import CORS

from .config import settings
from .db import init_db
from .exceptions import (
    AuthenticationError,
    Conflict,
    RegistrationDisabled,
    ResourceNotFound,
    ValidationError,
    ZtAuthError,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
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
def _error_response(error: ZtAuthError, status: int):
    response = {
        "error": {
            "type": error.__class__.__name__,
            "message": error.message
        }
    }
    if error.details:
        response["error"]["details"] = error.details
    return jsonify(response), status


@app.errorhandler(ValidationError)
def handle_validation_error(error):
    """Handle ValidationError and PolicyViolation exceptions."""
    return _error_response(error, 400)


@app.errorhandler(RegistrationDisabled)
def handle_registration_disabled(error):
    """Handle RegistrationDisabled exceptions."""
    return _error_response(error, 400)


@app.errorhandler(AuthenticationError)
def handle_authentication_error(error):
    """Handle AuthenticationError exceptions."""
    return _error_response(error, 401)


@app.errorhandler(ResourceNotFound)
def handle_not_found(error):
    """Handle ResourceNotFound exceptions."""
    return _error_response(error, 404)


@app.errorhandler(Conflict)
def handle_conflict(error):
    """Handle Conflict exceptions."""
    return _error_response(error, 409)


@app.errorhandler(ZtAuthError)
def handle_ztauth_error(error):
    """Handle any other ZtAuthError (e.g. TemplateError)."""
    logger.error(f"{error.__class__.__name__}: {error.message}")
    return _error_response(error, 500)


@app.errorhandler(500)
def handle_internal_error(error):
    """Handle internal server errors."""
    logger.error(f"Internal error: {error}")
    return jsonify({
        "error": {
            "type": "InternalServerError",
            "message": "An internal error occurred"
        }
    }), 500


# Health check endpoint
@app.route("/health")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


# Register blueprints
from .api.v1 import api_v1_bp
from .auth.api import auth_bp

app.register_blueprint(auth_bp)
app.register_blueprint(api_v1_bp)


if __name__ == "__main__":
    app.run(debug=True)
