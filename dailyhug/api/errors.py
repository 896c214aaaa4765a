"""Error handlers for the application (JSON only)."""
from flask import jsonify
from werkzeug.exceptions import HTTPException

from dailyhug.core.errors import ApiError
from dailyhug.core.firebase import FirebaseServiceError


def register_error_handlers(app):
    """Register error handlers with the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        """Taxonomy errors raised by services and guards."""
        if error.status >= 500:
            app.logger.error(f"{error.__class__.__name__}: {error.detail}")
        return jsonify(error.to_dict()), error.status

    @app.errorhandler(FirebaseServiceError)
    def handle_firebase_error(error: FirebaseServiceError):
        """Upstream Firebase failures mapped to the closest status."""
        app.logger.error(f"Firebase error during {error.operation}: {error.message}")
        return jsonify({
            "success": False,
            "error": error.message,
            "code": "upstream_error",
        }), error.status_code

    @app.errorhandler(400)
    def bad_request(error):
        """Handle 400 Bad Request errors (e.g. unparsable JSON)."""
        return jsonify({"success": False, "error": "Invalid request body"}), 400

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found errors."""
        return jsonify({"success": False, "error": "Endpoint not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"success": False, "error": "Method not allowed"}), 405

    @app.errorhandler(413)
    def request_too_large(error):
        return jsonify({"success": False, "error": "Request payload too large"}), 413

    @app.errorhandler(429)
    def too_many_requests(error):
        """Handle 429 from the /api rate limit."""
        return jsonify({"success": False, "error": "Too many requests, please try again later."}), 429

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 Internal Server Error."""
        app.logger.error(f"Internal error: {error}", exc_info=True)
        return jsonify({"success": False, "error": "Something went wrong!"}), 500

    @app.errorhandler(Exception)
    def handle_exception(error):
        """Handle uncaught exceptions."""
        # Pass through HTTP errors
        if isinstance(error, HTTPException):
            return error

        app.logger.error(f"Unhandled exception: {error}", exc_info=True)
        return jsonify({"success": False, "error": "Something went wrong!"}), 500
