"""
Error normalizer.

Every failure in the request pipeline ends up here and is turned into exactly
one JSON error envelope:

    { "success": false, "error": str, "message": str, "code": str, "stack"?: str }

The fixed mappings are checked first, in order. Anything else that carries its
own status/code is passed through, and whatever is left becomes INTERNAL_ERROR.
"""

import logging
import re
import traceback
from typing import Any, Dict, Optional, Tuple

from flask import Flask, Response, current_app, has_request_context, jsonify, request
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from image_api.errors.exceptions import ApiError, ErrorKind

ErrorEnvelope = Dict[str, Any]

# (kind, status, code, error title), first match wins
FIXED_MAPPINGS = [
    (ErrorKind.CORS_REJECTION, 403, "CORS_ERROR", "CORS policy violation"),
    (ErrorKind.UPLOAD_SIZE_EXCEEDED, 400, "LIMIT_FILE_SIZE", "Upload failed"),
    (ErrorKind.UPLOAD_COUNT_EXCEEDED, 400, "LIMIT_FILE_COUNT", "Upload failed"),
    (ErrorKind.UPLOAD_FIELD_UNEXPECTED, 400, "LIMIT_UNEXPECTED_FILE", "Upload failed"),
    (ErrorKind.INVALID_FILE_TYPE, 400, "INVALID_FILE_TYPE", "Invalid file type"),
    (ErrorKind.MISSING_INPUT, 400, "NO_FILE_PROVIDED", "No file provided"),
]

GENERIC_MESSAGE = "An unexpected error occurred"


def _envelope(error: str, message: str, code: str, stack: Optional[str] = None) -> ErrorEnvelope:
    body: ErrorEnvelope = {
        "success": False,
        "error": error,
        "message": message,
        "code": code,
    }
    if stack:
        body["stack"] = stack
    return body


def _format_stack(error: BaseException) -> str:
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def _http_code_name(error: HTTPException) -> str:
    """'Bad Request' -> 'BAD_REQUEST'."""
    return re.sub(r"[^A-Z0-9]+", "_", (error.name or "HTTP Error").upper()).strip("_")


def _body_over_cap() -> bool:
    """True when the current request declares a body larger than MAX_CONTENT_LENGTH."""
    if not has_request_context():
        return False
    limit = request.max_content_length
    return limit is not None and (request.content_length or 0) > limit


def build_error_envelope(error: BaseException, include_stack: bool) -> Tuple[ErrorEnvelope, int]:
    """
    Map a failure to its error envelope and HTTP status.

    Args:
        error (BaseException): The failure raised while handling the request.
        include_stack (bool): Attach a diagnostic stack trace to tagged and
            unclassified errors (only set in development).

    Returns:
        tuple: (envelope dict, HTTP status)
    """
    if isinstance(error, ApiError):
        for kind, status, code, title in FIXED_MAPPINGS:
            if error.kind == kind:
                return _envelope(title, error.message, code), status

    # Werkzeug rejects bodies over MAX_CONTENT_LENGTH before the upload is read.
    # Form part and field memory limits raise the same error and pass through below.
    if isinstance(error, RequestEntityTooLarge) and _body_over_cap():
        return _envelope("Upload failed", "File size exceeds upload limit", "LIMIT_FILE_SIZE"), 400

    stack = _format_stack(error) if include_stack else None

    # Tagged errors keep their own status and code
    if isinstance(error, ApiError) and error.code:
        return _envelope(error.message, error.message, error.code, stack), error.status or 500

    if isinstance(error, HTTPException):
        message = error.description or error.name
        return _envelope(error.name, message, _http_code_name(error), stack), error.code or 500

    if isinstance(error, ApiError):
        message = error.message
        status = error.status or 500
    else:
        # Raw exception text stays out of production responses
        message = (str(error) if include_stack else "") or GENERIC_MESSAGE
        status = 500

    return _envelope("Internal server error", message, "INTERNAL_ERROR", stack), status


def handle_error(error: Exception) -> Tuple[Response, int]:
    """
    Flask error handler for every exception raised during a request.
    Never raises: a failure while normalizing still produces an INTERNAL_ERROR envelope.
    """
    try:
        settings = current_app.config["SETTINGS"]
        body, status = build_error_envelope(error, settings.include_stack)

        if body["code"] == "INTERNAL_ERROR":
            logging.error(f"[Error] {request.method} {request.path}", exc_info=error)
        else:
            logging.error(f"[Error] {request.method} {request.path} -> {status} {body['code']}: {body['message']}")

        return jsonify(body), status
    except Exception:
        logging.exception("[Error] Error normalizer failed")
        return jsonify(_envelope("Internal server error", GENERIC_MESSAGE, "INTERNAL_ERROR")), 500


def handle_not_found(error: HTTPException) -> Tuple[Response, int]:
    """
    Unknown paths and unsupported methods on known paths both answer 404.
    """
    logging.info(f"[Error] No route for {request.method} {request.path}")
    return jsonify(_envelope(
        "Route not found",
        f"Cannot {request.method} {request.path}",
        "NOT_FOUND",
    )), 404


def register_error_handlers(app: Flask) -> None:
    """Install the normalizer as the single writer of error responses."""
    app.register_error_handler(404, handle_not_found)
    app.register_error_handler(405, handle_not_found)
    app.register_error_handler(Exception, handle_error)
