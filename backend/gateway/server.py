"""
API gateway: combines the auth, events and signup blueprints.
This is the entrypoint for running the service.
"""

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import os
import logging
import sys
from dotenv import load_dotenv

from backend.errors import APIError

load_dotenv()

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "*")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins if origins != ["*"] else "*"


def register_error_handlers(app: Flask) -> None:
    """Return JSON for every error instead of Flask's HTML pages."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        return error.to_response()

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        # Routing redirects (e.g. trailing slashes) keep their Location header
        if error.code is not None and error.code < 400:
            return error
        return jsonify({"error": error.name}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logging.exception(f"Unhandled error: {error}")
        return jsonify({"error": "Internal server error"}), 500


def create_app() -> Flask:
    """
    Application factory for creating the Flask app.

    Returns:
        Flask: The configured Flask application.
    """
    app = Flask(__name__)

    CORS(app, resources={
        r"/*": {
            "origins": _cors_origins(),
            "methods": ["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
            "expose_headers": ["Content-Type", "Authorization"],
        }
    })

    # --- REGISTER BLUEPRINTS ---
    from backend.auth_service.routes import auth_bp
    from backend.events_service.routes import events_bp
    from backend.user_events_service.routes import user_events_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(events_bp, url_prefix="/api/v1/events")
    app.register_blueprint(user_events_bp, url_prefix="/api/v1")

    logging.info("All blueprints registered successfully.")

    register_error_handlers(app)

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return jsonify({"status": "gateway_ok"}), 200

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"}), 200

    return app


def main() -> None:
    from backend.database.init_db import init_db, create_initial_admin

    try:
        init_db()
        create_initial_admin()
    except Exception as e:
        logging.critical(f"Startup failed: {e}")
        sys.exit(1)

    app = create_app()
    port = int(os.getenv("PORT", 8080))
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
