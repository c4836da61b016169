"""
API gateway: wires the origin policy, the image blueprint and the error normalizer.
This is the local entrypoint for development.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Tuple

from flask import Flask, Response, jsonify

from image_api.errors.handlers import register_error_handlers
from image_api.gateway.origin import init_origin_policy
from image_api.gateway.settings import Settings, load_settings
from image_api.image_service.routes import image_bp

# Basic console logging during API requests
logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")

# Room for multipart boundaries and small form fields on top of the file itself
MULTIPART_OVERHEAD_BYTES = 1024 * 1024


def _utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with milliseconds, e.g. 2025-01-01T10:00:00.000Z"""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(settings: Optional[Settings] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings (Settings, optional): Configuration to use. Loaded from the
            environment when omitted.

    Returns:
        Flask: The configured Flask application.
    """
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config["SETTINGS"] = settings
    # Hard cap on the request body; the per-file limit is enforced by the upload acceptor
    app.config["MAX_CONTENT_LENGTH"] = settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES

    init_origin_policy(app, settings)
    app.register_blueprint(image_bp)
    register_error_handlers(app)

    # --- BASIC HEALTH CHECKPOINT ---
    @app.route("/health")
    def health() -> Tuple[Response, int]:
        """
        Health check endpoint. Reports whether the OpenAI key is set, never its value.
        """
        return jsonify({
            "status": "ok",
            "timestamp": _utc_timestamp(),
            "openaiConfigured": settings.openai_configured,
        }), 200

    return app


def main() -> None:
    settings = load_settings()
    app = create_app(settings)

    logging.info(f"Server running on http://localhost:{settings.port}")
    logging.info(f"OpenAI API Key: {'Configured' if settings.openai_configured else 'Missing'}")
    logging.info(f"Environment: {settings.environment}")

    app.run(host="0.0.0.0", port=settings.port, debug=settings.environment == "development")


if __name__ == "__main__":
    main()
