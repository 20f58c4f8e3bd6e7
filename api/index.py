"""Vercel serverless entrypoint: medicine image analysis endpoint.

Vercel's Python runtime serves the WSGI ``app`` exported here. The single
route accepts ``multipart/form-data`` with one ``image`` part, forwards it to
the configured vision model and answers ``{"role", "content"}`` JSON.
"""

from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

# Ensure project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.errors import AnalysisError, InternalFault, InvalidInput, IOFailure
from core.models import ImageSubmission
from core.pipeline import analyze_submission, check_upload_size
from core.providers import VisionProvider, get_provider
from core.settings import Settings

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Please use POST with an image."
MISSING_IMAGE_MESSAGE = (
    'No image provided. Please include an image in the form data with key "image".'
)
UNSUPPORTED_TYPE_MESSAGE = "Unsupported file type. Please upload an image."
READ_FAILED_MESSAGE = "Failed to read image file. Please try with a different image."

ALLOWED_METHODS = ["POST", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type"]

CORS_OPTIONS = {
    "origins": "*",
    "send_wildcard": True,
    "methods": ALLOWED_METHODS,
    "allow_headers": ALLOWED_HEADERS,
    "max_age": 86400,
}


def read_submission(settings: Settings) -> ImageSubmission:
    """Pull the ``image`` part out of the current request."""
    image = request.files.get("image")
    # A part with an empty filename is still an image part.
    if image is None:
        raise InvalidInput(MISSING_IMAGE_MESSAGE)

    mime_type = image.mimetype or ""
    if mime_type == "application/octet-stream":
        mime_type = ""
    if mime_type and not mime_type.startswith("image/"):
        raise InvalidInput(UNSUPPORTED_TYPE_MESSAGE)

    if image.content_length:
        check_upload_size(image.content_length, settings.max_upload_bytes)

    try:
        data = image.read()
    except OSError as exc:
        logger.error("Error reading image buffer: %s", exc)
        raise IOFailure(READ_FAILED_MESSAGE) from exc

    submission = ImageSubmission(data=data, mime_type=mime_type, filename=image.filename or "image")
    logger.info("Image file received: %s", submission.describe())
    return submission


def create_app(settings: Settings | None = None, provider: VisionProvider | None = None) -> Flask:
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config["ANALYSIS_SETTINGS"] = settings

    # flask-cors only answers methods/headers on a full pre-flight; send them
    # on every response. Registered before CORS so these values are final.
    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Methods"] = ", ".join(ALLOWED_METHODS)
        response.headers["Access-Control-Allow-Headers"] = ", ".join(ALLOWED_HEADERS)
        return response

    CORS(app, resources={r"/*": CORS_OPTIONS})

    def current_provider() -> VisionProvider:
        # Built on first use so a missing key only fails requests that reach the model.
        if "vision_provider" not in app.extensions:
            app.extensions["vision_provider"] = provider or get_provider(
                settings.provider, **settings.provider_kwargs()
            )
        return app.extensions["vision_provider"]

    @app.route("/", defaults={"path": ""}, methods=["POST"])
    @app.route("/<path:path>", methods=["POST"])
    def analyze(path: str):
        logger.info("Processing request...")
        result = analyze_submission(read_submission(settings), current_provider, settings)
        return jsonify(result.to_dict())

    @app.errorhandler(AnalysisError)
    def handle_analysis_error(exc: AnalysisError):
        logger.warning("Request failed (%s, %d): %s", exc.kind, exc.status_code, exc.message)
        return jsonify(exc.to_dict()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        message = METHOD_NOT_ALLOWED_MESSAGE if exc.code == 405 else exc.description
        return jsonify({"error": message}), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Worker error")
        fault = InternalFault(str(exc) or exc.__class__.__name__)
        return jsonify(fault.to_dict()), fault.status_code

    return app


app = create_app()


if __name__ == "__main__":
    app.run(debug=True)
